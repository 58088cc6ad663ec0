"""Message formatting strategies.

A MessageFormatter renders a translation template with MessageParams for a
locale. Two interchangeable strategies exist, selected once per client
configuration:

- IcuMessageFormatter: ICU MessageFormat (plural, select, arguments)
- SprintfMessageFormatter: printf-style positional substitution
"""

import re
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Optional, Sequence

from tolgee_client.i18n.exceptions import MessageFormatError
from tolgee_client.i18n.icu import format_message
from tolgee_client.i18n.models import Formatter, Indexed, Locale, MessageParams, NoParams
from tolgee_client.logging import get_module_logger

logger = get_module_logger()


class MessageFormatter(ABC):
    """Renders templates into final text.

    Implementations never raise: a template that cannot be rendered yields
    None, which callers treat as "no translation available".
    """

    @abstractmethod
    def render(
        self,
        template: str,
        params: MessageParams,
        locale: Optional[Locale],
    ) -> Optional[str]:
        """Render a template.

        Args:
            template: Translation text from the bundle.
            params: NoParams or Indexed values.
            locale: Locale driving locale-sensitive rules (plurals, numbers).

        Returns:
            Rendered text, or None if rendering failed.
        """
        pass


def _args(params: MessageParams) -> Sequence[Any]:
    if isinstance(params, NoParams):
        return ()
    if isinstance(params, Indexed):
        return params.values
    raise TypeError(f"Unsupported message params: {params!r}")


class IcuMessageFormatter(MessageFormatter):
    """ICU MessageFormat strategy.

    A template without arguments is returned after unquoting even when no
    params are passed; a template that needs arguments renders None when
    params do not supply them.
    """

    def render(
        self,
        template: str,
        params: MessageParams,
        locale: Optional[Locale],
    ) -> Optional[str]:
        tag = locale.tag if locale else None
        try:
            return format_message(template, _args(params), tag)
        except (MessageFormatError, ArithmeticError, TypeError, ValueError) as e:
            logger.debug(
                "icu_render_failed",
                template=template,
                locale=tag,
                error=str(e),
            )
            return None


# %[argument_index$][flags][width][.precision]conversion
_SPECIFIER = re.compile(
    r"%(?:(?P<index>\d+)\$)?(?P<flags>[-#+ 0,(]*)(?P<width>\d+)?"
    r"(?:\.(?P<precision>\d+))?(?P<conversion>[a-zA-Z%])"
)

_INTEGER_CONVERSIONS = frozenset("dxXo")
_FLOAT_CONVERSIONS = frozenset("feEgG")


class _Unsatisfiable(Exception):
    pass


class SprintfMessageFormatter(MessageFormatter):
    """printf-style strategy.

    Substitutes ``%s``, ``%d``, ``%f`` and friends in argument order, with
    explicit positions (``%2$s``), ``%%`` and ``%n``. Mismatches are lenient:
    a specifier without a suitable value is left verbatim and the remaining
    ones are still substituted.
    """

    def render(
        self,
        template: str,
        params: MessageParams,
        locale: Optional[Locale],
    ) -> Optional[str]:
        args = _args(params)
        sequential = 0

        def substitute(match: "re.Match[str]") -> str:
            nonlocal sequential
            conversion = match.group("conversion")
            if conversion == "%":
                return "%"
            if conversion == "n":
                return "\n"
            if conversion.lower() not in "sdxofegcb":
                return match.group(0)

            if match.group("index"):
                position = int(match.group("index")) - 1
            else:
                position = sequential
                sequential += 1

            if position < 0 or position >= len(args):
                return match.group(0)
            try:
                return _convert(match, args[position])
            except (_Unsatisfiable, TypeError, ValueError, OverflowError):
                return match.group(0)

        result = _SPECIFIER.sub(substitute, template)
        if sequential > len(args):
            logger.debug(
                "sprintf_argument_mismatch",
                template=template,
                expected=sequential,
                supplied=len(args),
            )
        return result


def _convert(match: "re.Match[str]", value: Any) -> str:
    conversion = match.group("conversion")
    flags = match.group("flags") or ""
    width = match.group("width") or ""
    precision = match.group("precision")
    grouping = "," in flags
    py_flags = "".join(flag for flag in flags if flag in "-#+ 0")
    lower = conversion.lower()

    if lower in ("s", "b", "c"):
        if lower == "b":
            text = "false" if value is None or value is False else "true"
        elif lower == "c":
            if isinstance(value, int) and not isinstance(value, bool):
                text = chr(value)
            elif isinstance(value, str) and len(value) == 1:
                text = value
            else:
                raise _Unsatisfiable(value)
        else:
            text = "null" if value is None else str(value)
            if isinstance(value, bool):
                text = text.lower()
        if precision is not None:
            text = text[: int(precision)]
        text = ("%" + ("-" if "-" in py_flags else "") + width + "s") % text
        return text.upper() if conversion.isupper() else text

    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise _Unsatisfiable(value)

    if conversion in _INTEGER_CONVERSIONS:
        if not isinstance(value, int):
            raise _Unsatisfiable(value)
        if grouping and conversion == "d":
            return format(value, f"{_align(py_flags)}{width},d")
        return ("%" + py_flags + width + conversion) % value

    if conversion in _FLOAT_CONVERSIONS:
        digits = "6" if precision is None else precision
        if grouping and lower == "f":
            return format(value, f"{_align(py_flags)}{width},.{digits}f")
        return ("%" + py_flags + width + "." + digits + conversion) % value

    raise _Unsatisfiable(value)


def _align(flags: str) -> str:
    return "<" if "-" in flags else ""


_FORMATTERS = {
    Formatter.ICU: IcuMessageFormatter(),
    Formatter.SPRINTF: SprintfMessageFormatter(),
}


def formatter_for(choice: Formatter) -> MessageFormatter:
    """Return the shared formatter for a configured strategy.

    Raises:
        ValueError: If the choice has no formatter.
    """
    try:
        return _FORMATTERS[Formatter(choice)]
    except (KeyError, ValueError) as e:
        raise ValueError(f"Unsupported formatter: {choice}") from e
