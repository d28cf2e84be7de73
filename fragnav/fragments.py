# fragnav/fragments.py
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

EXECUTABLE_TYPES = {
    "",
    "module",
    "text/javascript",
    "application/javascript",
    "application/ecmascript",
    "text/ecmascript",
}

INDEX_ATTR = "data-fragnav-index"


@dataclass
class EmbeddedFragment:
    """
    One embedded script found in fetched content.

    :param index: Position among the container's scripts, in document order.
    :param attrs: The element's attributes, copied verbatim onto its replacement.
    :param code: Inline body (may be blank).
    :param src: Address of the externally-sourced resource, if any.
    """
    index: int
    attrs: Dict[str, str] = field(default_factory=dict)
    code: str = ""
    src: Optional[str] = None

    @property
    def is_external(self) -> bool:
        return bool(self.src)

    @property
    def is_inline(self) -> bool:
        return not self.is_external and bool(self.code.strip())

    @property
    def is_executable(self) -> bool:
        return self.attrs.get("type", "").strip().lower() in EXECUTABLE_TYPES

    @property
    def is_module(self) -> bool:
        return self.attrs.get("type", "").strip().lower() == "module"


def _script_tags(soup: BeautifulSoup) -> list:
    # <template> content is inert and out of reach of querySelector
    return [tag for tag in soup.find_all("script") if tag.find_parent("template") is None]


def parse_fragments(markup: str) -> List[EmbeddedFragment]:
    """Lists every live <script> element in `markup`, in document order."""
    if not markup:
        return []
    soup = BeautifulSoup(markup, "html.parser")
    fragments = []
    for index, tag in enumerate(_script_tags(soup)):
        attrs = {}
        for name, value in tag.attrs.items():
            # bs4 hands multi-valued attributes (class) back as lists
            attrs[name] = " ".join(value) if isinstance(value, list) else ("" if value is None else str(value))
        fragments.append(
            EmbeddedFragment(
                index=index,
                attrs=attrs,
                code=tag.string or "",
                src=attrs.get("src") or None,
            )
        )
    return fragments


def wrap_inline(code: str) -> str:
    """
    Wraps an inline body in a self-invoking closure.

    Top-level const/let bindings become local to the closure, so loading the
    same fragment twice cannot raise "Identifier has already been declared".
    Errors thrown by the body are reported to the page console and stop there.
    """
    return (
        "(function() {\n"
        "    try {\n"
        f"{code}\n"
        "    } catch (err) {\n"
        '        console.error("❌ Embedded fragment failed after load:", err);\n'
        "    }\n"
        "})();"
    )


def tag_fragments(markup: str) -> str:
    """
    Stamps each live <script> in `markup` with its fragment index.

    The page looks fragments up by this attribute instead of by position, so
    scripts that earlier fragments add to the container at run time do not
    shift the lookup. Markup without scripts comes back untouched.
    """
    if not markup or "<script" not in markup.lower():
        return markup
    soup = BeautifulSoup(markup, "html.parser")
    tags = _script_tags(soup)
    if not tags:
        return markup
    for index, tag in enumerate(tags):
        tag[INDEX_ATTR] = str(index)
    return str(soup)
