"""ICU MessageFormat parsing and rendering.

Supports the subset of ICU MessageFormat that Tolgee emits:

- literal text with apostrophe quoting (``''`` is a literal apostrophe,
  ``'{'`` quotes syntax characters)
- simple arguments ``{name}`` and ``{0}``
- typed arguments ``{n, number}``, ``{n, number, integer|percent|<pattern>}``,
  ``{d, date, short|medium|long|full}``, ``{t, time, ...}``
- ``{n, plural, offset:1 =0 {...} one {...} other {...}}`` with ``#``
- ``{n, selectordinal, one {#st} two {#nd} few {#rd} other {#th}}``
- ``{g, select, male {...} female {...} other {...}}``

Plural categories and number/date formatting come from CLDR data via Babel.

Usage:
    from tolgee_client.i18n.icu import format_message

    format_message("Hello {name}", ("World",), "en")  # -> "Hello World"
"""

import datetime
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from numbers import Number
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import babel
from babel import dates as babel_dates
from babel import numbers as babel_numbers

from tolgee_client.i18n.exceptions import MessageFormatError

PLURAL_CATEGORIES = frozenset({"zero", "one", "two", "few", "many", "other"})
_SYNTAX_CHARS = "{}"
_MAX_NESTING = 32


@dataclass(frozen=True)
class Argument:
    name: Union[int, str]
    kind: Optional[str] = None
    style: Optional[str] = None


@dataclass(frozen=True)
class Plural:
    name: Union[int, str]
    options: Tuple[Tuple[str, tuple], ...]
    offset: int = 0
    ordinal: bool = False


@dataclass(frozen=True)
class Select:
    name: Union[int, str]
    options: Tuple[Tuple[str, tuple], ...]


class _Pound:
    def __repr__(self) -> str:
        return "#"


POUND = _Pound()

Node = Union[str, Argument, Plural, Select, _Pound]


class _Parser:
    """Recursive descent parser producing a tuple of nodes."""

    def __init__(self, template: str):
        self.template = template
        self.pos = 0

    def error(self, message: str) -> MessageFormatError:
        return MessageFormatError(f"{message} at offset {self.pos} in {self.template!r}")

    def parse(self) -> tuple:
        nodes = self._message(in_plural=False, depth=0)
        if self.pos < len(self.template):
            raise self.error("Unmatched '}'")
        return nodes

    def _message(self, in_plural: bool, depth: int) -> tuple:
        if depth > _MAX_NESTING:
            raise self.error("Message nesting too deep")

        nodes: List[Node] = []
        text: List[str] = []
        template = self.template

        while self.pos < len(template):
            char = template[self.pos]
            if char == "'":
                text.append(self._quoted(in_plural))
            elif char == "{":
                if text:
                    nodes.append("".join(text))
                    text = []
                nodes.append(self._argument(depth, in_plural))
            elif char == "}":
                break
            elif char == "#" and in_plural:
                if text:
                    nodes.append("".join(text))
                    text = []
                nodes.append(POUND)
                self.pos += 1
            else:
                text.append(char)
                self.pos += 1

        if text:
            nodes.append("".join(text))
        return tuple(nodes)

    def _quoted(self, in_plural: bool) -> str:
        template = self.template
        nxt = template[self.pos + 1] if self.pos + 1 < len(template) else ""

        if nxt == "'":
            self.pos += 2
            return "'"

        if nxt and (nxt in _SYNTAX_CHARS or nxt == "|" or (in_plural and nxt == "#")):
            self.pos += 1
            chunk: List[str] = []
            while self.pos < len(template):
                char = template[self.pos]
                if char == "'":
                    if template[self.pos + 1 : self.pos + 2] == "'":
                        chunk.append("'")
                        self.pos += 2
                        continue
                    self.pos += 1
                    return "".join(chunk)
                chunk.append(char)
                self.pos += 1
            # an unterminated quote runs to the end of the message
            return "".join(chunk)

        self.pos += 1
        return "'"

    def _skip_ws(self) -> None:
        while self.pos < len(self.template) and self.template[self.pos].isspace():
            self.pos += 1

    def _word(self) -> str:
        start = self.pos
        while self.pos < len(self.template):
            char = self.template[self.pos]
            if char.isspace() or char in "{},":
                break
            self.pos += 1
        return self.template[start : self.pos]

    def _expect(self, char: str) -> None:
        if self.pos >= len(self.template) or self.template[self.pos] != char:
            raise self.error(f"Expected {char!r}")
        self.pos += 1

    def _argument(self, depth: int, in_plural: bool) -> Node:
        self._expect("{")
        self._skip_ws()
        raw_name = self._word()
        if not raw_name:
            raise self.error("Missing argument name")
        if raw_name.isdigit():
            name: Union[int, str] = int(raw_name)
        elif raw_name.replace("_", "a").isalnum():
            name = raw_name
        else:
            raise self.error(f"Invalid argument name {raw_name!r}")
        self._skip_ws()

        if self.pos < len(self.template) and self.template[self.pos] == "}":
            self.pos += 1
            return Argument(name)

        self._expect(",")
        self._skip_ws()
        kind = self._word().lower()
        if not kind:
            raise self.error("Missing argument type")
        self._skip_ws()

        if kind in ("plural", "selectordinal", "select"):
            self._expect(",")
            node = self._options(name, kind, depth, in_plural)
            self._expect("}")
            return node

        style = None
        if self.pos < len(self.template) and self.template[self.pos] == ",":
            self.pos += 1
            start = self.pos
            while self.pos < len(self.template) and self.template[self.pos] != "}":
                if self.template[self.pos] == "{":
                    raise self.error("Unexpected '{' in argument style")
                self.pos += 1
            style = self.template[start : self.pos].strip() or None
        self._expect("}")
        return Argument(name, kind, style)

    def _options(
        self, name: Union[int, str], kind: str, depth: int, in_plural: bool
    ) -> Node:
        offset = 0
        options: Dict[str, tuple] = {}
        is_plural = kind != "select"
        in_plural = in_plural or is_plural

        while True:
            self._skip_ws()
            if self.pos >= len(self.template):
                raise self.error(f"Unterminated {kind}")
            if self.template[self.pos] == "}":
                break

            selector = self._word()
            if not selector:
                raise self.error(f"Missing {kind} selector")

            if selector.startswith("offset:") and kind == "plural":
                if options:
                    raise self.error("offset must precede plural options")
                value = selector[len("offset:") :] or self._offset_value()
                try:
                    offset = int(value)
                except ValueError:
                    raise self.error(f"Invalid plural offset {value!r}") from None
                continue

            if is_plural and not (
                selector in PLURAL_CATEGORIES
                or (selector.startswith("=") and _is_number(selector[1:]))
            ):
                raise self.error(f"Invalid {kind} selector {selector!r}")

            self._skip_ws()
            self._expect("{")
            options[selector] = self._message(in_plural=in_plural, depth=depth + 1)
            self._expect("}")

        if "other" not in options:
            raise self.error(f"{kind} is missing the 'other' option")

        if kind == "select":
            return Select(name, tuple(options.items()))
        return Plural(
            name,
            tuple(options.items()),
            offset=offset,
            ordinal=kind == "selectordinal",
        )

    def _offset_value(self) -> str:
        self._skip_ws()
        return self._word()


def _is_number(value: str) -> bool:
    try:
        Decimal(value)
    except ArithmeticError:
        return False
    return bool(value)


@lru_cache(maxsize=1024)
def parse_message(template: str) -> tuple:
    """Parse a template into nodes.

    Raises:
        MessageFormatError: If the template is malformed.
    """
    return _Parser(template).parse()


def argument_names(nodes: Sequence[Node]) -> List[Union[int, str]]:
    """Argument names in order of first appearance (pre-order)."""
    seen: List[Union[int, str]] = []

    def visit(items: Sequence[Node]) -> None:
        for node in items:
            if isinstance(node, (Argument, Plural, Select)):
                if node.name not in seen:
                    seen.append(node.name)
                if isinstance(node, (Plural, Select)):
                    for _, sub in node.options:
                        visit(sub)

    visit(nodes)
    return seen


@lru_cache(maxsize=256)
def babel_locale(tag: Optional[str]) -> Optional[babel.Locale]:
    """Resolve a tag to Babel locale data, falling back to its language."""
    if not tag:
        return None
    candidates = [tag]
    language = tag.replace("_", "-").split("-")[0]
    if language != tag:
        candidates.append(language)
    for candidate in candidates:
        try:
            return babel.Locale.parse(candidate, sep="-")
        except (babel.UnknownLocaleError, ValueError, TypeError):
            continue
    return None


def plural_category(value: Any, tag: Optional[str], ordinal: bool = False) -> str:
    """CLDR plural category of ``value`` for the locale, 'other' when unknown."""
    locale = babel_locale(tag)
    if locale is None:
        return "other"
    rule = locale.ordinal_form if ordinal else locale.plural_form
    return rule(value)


class _Renderer:
    def __init__(self, args: Sequence[Any], names: List[Union[int, str]], tag: Optional[str]):
        self.args = args
        self.tag = tag
        self.locale = babel_locale(tag)
        # named arguments take the positions after the highest numeric one
        first = max((n + 1 for n in names if isinstance(n, int)), default=0)
        self.positions: Dict[str, int] = {}
        for name in names:
            if isinstance(name, str):
                self.positions[name] = first + len(self.positions)

    def value(self, name: Union[int, str]) -> Any:
        index = name if isinstance(name, int) else self.positions[name]
        if index >= len(self.args):
            raise MessageFormatError(f"No value supplied for argument {name!r}")
        return self.args[index]

    def render(self, nodes: Sequence[Node], pound: Optional[Any] = None) -> str:
        out: List[str] = []
        for node in nodes:
            if isinstance(node, str):
                out.append(node)
            elif node is POUND:
                out.append(self.number(pound))
            elif isinstance(node, Argument):
                out.append(self.argument(node))
            elif isinstance(node, Plural):
                out.append(self.plural(node))
            elif isinstance(node, Select):
                out.append(self.select(node, pound))
        return "".join(out)

    def argument(self, node: Argument) -> str:
        value = self.value(node.name)
        if node.kind is None:
            return _stringify(value)
        if node.kind == "number":
            return self.number(value, node.style)
        if node.kind in ("date", "time"):
            return self.temporal(value, node.kind, node.style)
        return _stringify(value)

    def number(self, value: Any, style: Optional[str] = None) -> str:
        if not _is_numeric(value):
            raise MessageFormatError(f"Expected a number, got {value!r}")
        if self.locale is None:
            return str(value)
        if style == "percent":
            return babel_numbers.format_percent(value, locale=self.locale)
        if style == "integer":
            return babel_numbers.format_decimal(value, format="#,##0", locale=self.locale)
        if style and not style.startswith("::"):
            return babel_numbers.format_decimal(value, format=style, locale=self.locale)
        return babel_numbers.format_decimal(value, locale=self.locale)

    def temporal(self, value: Any, kind: str, style: Optional[str]) -> str:
        fmt = style or "medium"
        locale = self.locale or "en"
        if kind == "time" and isinstance(value, (datetime.datetime, datetime.time)):
            return babel_dates.format_time(value, format=fmt, locale=locale)
        if kind == "date" and isinstance(value, (datetime.date, datetime.datetime)):
            return babel_dates.format_date(value, format=fmt, locale=locale)
        return _stringify(value)

    def plural(self, node: Plural) -> str:
        value = self.value(node.name)
        if not _is_numeric(value):
            raise MessageFormatError(f"Plural argument {node.name!r} is not a number")
        options = dict(node.options)

        for selector, sub in node.options:
            if selector.startswith("=") and Decimal(selector[1:]) == Decimal(str(value)):
                return self.render(sub, pound=value - node.offset)

        adjusted = value - node.offset
        category = plural_category(abs(adjusted), self.tag, ordinal=node.ordinal)
        sub = options.get(category, options["other"])
        return self.render(sub, pound=adjusted)

    def select(self, node: Select, pound: Optional[Any] = None) -> str:
        value = self.value(node.name)
        options = dict(node.options)
        return self.render(options.get(_stringify(value), options["other"]), pound)


def _is_numeric(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _stringify(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_message(template: str, args: Sequence[Any], tag: Optional[str]) -> str:
    """Render an ICU template with positional values.

    Named arguments are bound to positions in order of first appearance, so
    ``"Hello {name}"`` with ``("World",)`` renders ``"Hello World"``.
    When numeric arguments are present too, named ones follow the highest
    numeric position: ``"{0} {name}"`` reads ``name`` from position 1.

    Raises:
        MessageFormatError: If the template is malformed or an argument has
            no value.
    """
    nodes = parse_message(template)
    renderer = _Renderer(args, argument_names(nodes), tag)
    return renderer.render(nodes)
