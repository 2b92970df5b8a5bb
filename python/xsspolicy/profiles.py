"""Built-in default policies.

A profile is pure data: the tag catalog, global attributes, structural
prefixes and protocols a PolicyStore starts from. Profiles never change; each
store copies what it needs.

Tag catalog entries map a tag to its extra attributes, or to None when the tag
is allowed with no attributes beyond the global set.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from xsspolicy.errors import UnknownProfileError

TagCatalog = Mapping[str, frozenset[str] | None]


def _attrs(*names: str) -> frozenset[str]:
    return frozenset(names)


@dataclass(frozen=True)
class PolicyProfile:
    """Default configuration for a PolicyStore."""

    name: str
    tags: TagCatalog
    global_attributes: frozenset[str]
    structural_prefixes: tuple[str, ...] = ("data-",)
    protocols: frozenset[str] = field(default_factory=lambda: frozenset({"https:"}))


HTML5_GLOBAL_ATTRIBUTES = _attrs(
    "accesskey",
    "autocapitalize",
    "autofocus",
    "class",
    "contenteditable",
    "dir",
    "draggable",
    "enterkeyhint",
    "hidden",
    "id",
    "inert",
    "inputmode",
    "lang",
    "nonce",
    "part",
    "role",
    "slot",
    "spellcheck",
    "tabindex",
    "translate",
)

_TABLE_CELL = _attrs("align", "colspan", "rowspan", "valign", "width")
_TABLE_SECTION = _attrs("align", "valign")
_COLUMN = _attrs("align", "span", "valign", "width")
_EDIT = _attrs("cite", "datetime")

HTML5_TAGS: TagCatalog = MappingProxyType(
    {
        "a": _attrs("href", "target", "title"),
        "abbr": _attrs("title"),
        "address": None,
        "area": _attrs("alt", "coords", "href", "shape"),
        "article": None,
        "aside": None,
        "audio": _attrs("autoplay", "controls", "crossorigin", "loop", "muted", "preload", "src"),
        "b": None,
        "body": None,
        "bdi": _attrs("dir"),
        "bdo": _attrs("dir"),
        "blockquote": _attrs("cite"),
        "br": None,
        "button": _attrs("disabled", "popovertarget", "popovertargetaction"),
        "caption": None,
        "cite": None,
        "code": None,
        "col": _COLUMN,
        "colgroup": _COLUMN,
        "data": _attrs("value"),
        "datalist": None,
        "dd": None,
        "del": _EDIT,
        "details": _attrs("name", "open"),
        "dfn": _attrs("title"),
        "div": None,
        "dl": None,
        "dt": None,
        "em": None,
        "fieldset": _attrs("disabled", "form", "name"),
        "figcaption": None,
        "figure": None,
        "footer": None,
        "form": None,
        "h1": None,
        "h2": None,
        "h3": None,
        "h4": None,
        "h5": None,
        "h6": None,
        "header": None,
        "hr": None,
        "i": None,
        "img": _attrs("alt", "height", "loading", "src", "srcset", "title", "width"),
        "input": _attrs(
            "accept",
            "alt",
            "autocomplete",
            "capture",
            "checked",
            "dirname",
            "disabled",
            "height",
            "list",
            "max",
            "maxlength",
            "min",
            "minlength",
            "multiple",
            "name",
            "pattern",
            "placeholder",
            "readonly",
            "required",
            "size",
            "src",
            "step",
            "type",
            "value",
            "width",
        ),
        "ins": _EDIT,
        "kbd": None,
        "label": _attrs("for"),
        "legend": None,
        "li": _attrs("value"),
        "main": None,
        "mark": None,
        "meter": _attrs("high", "low", "max", "min", "optimum", "value"),
        "nav": None,
        "ol": _attrs("reversed", "start", "type"),
        "optgroup": _attrs("disabled", "label"),
        "option": _attrs("disabled", "label", "selected", "value"),
        "p": None,
        "picture": None,
        "pre": None,
        "progress": _attrs("max", "value"),
        "q": _attrs("cite"),
        "rp": None,
        "rt": None,
        "ruby": None,
        "s": None,
        "samp": None,
        "search": None,
        "section": None,
        "select": _attrs("autocomplete", "disabled", "multiple", "name", "required", "size"),
        "small": None,
        "source": _attrs("height", "media", "sizes", "src", "srcset", "type", "width"),
        "span": None,
        "strong": None,
        "sub": None,
        "summary": None,
        "sup": None,
        "table": _attrs("align", "border", "valign", "width"),
        "tbody": _TABLE_SECTION,
        "td": _TABLE_CELL,
        "textarea": _attrs(
            "autocomplete",
            "autocorrect",
            "cols",
            "dirname",
            "disabled",
            "maxlength",
            "minlength",
            "placeholder",
            "readonly",
            "required",
            "rows",
            "spellcheck",
            "wrap",
        ),
        "tfoot": _TABLE_SECTION,
        "th": _TABLE_CELL,
        "thead": _TABLE_SECTION,
        "time": _attrs("datetime"),
        "tr": _attrs("align", "rowspan", "valign"),
        "track": _attrs("default", "kind", "label", "src"),
        "u": None,
        "ul": None,
        "var": None,
        "video": _attrs(
            "autoplay",
            "controls",
            "crossorigin",
            "height",
            "loop",
            "muted",
            "playsinline",
            "poster",
            "preload",
            "src",
            "width",
        ),
        "wbr": None,
    }
)

# Text, structure, tables and media only: no form controls
BASIC_GLOBAL_ATTRIBUTES = _attrs("class", "dir", "hidden", "id", "lang", "title")

BASIC_TAGS: TagCatalog = MappingProxyType(
    {
        "a": _attrs("href", "target"),
        "abbr": None,
        "article": None,
        "aside": None,
        "b": None,
        "blockquote": _attrs("cite"),
        "br": None,
        "caption": None,
        "code": None,
        "col": _COLUMN,
        "colgroup": _COLUMN,
        "dd": None,
        "del": _EDIT,
        "details": _attrs("open"),
        "div": None,
        "dl": None,
        "dt": None,
        "em": None,
        "figcaption": None,
        "figure": None,
        "footer": None,
        "h1": None,
        "h2": None,
        "h3": None,
        "h4": None,
        "h5": None,
        "h6": None,
        "header": None,
        "hr": None,
        "i": None,
        "img": _attrs("alt", "height", "loading", "src", "srcset", "width"),
        "ins": _EDIT,
        "kbd": None,
        "li": _attrs("value"),
        "mark": None,
        "ol": _attrs("reversed", "start", "type"),
        "p": None,
        "picture": None,
        "pre": None,
        "q": _attrs("cite"),
        "s": None,
        "section": None,
        "small": None,
        "source": _attrs("media", "sizes", "srcset", "type"),
        "span": None,
        "strong": None,
        "sub": None,
        "summary": None,
        "sup": None,
        "table": _attrs("border", "width"),
        "tbody": _TABLE_SECTION,
        "td": _TABLE_CELL,
        "tfoot": _TABLE_SECTION,
        "th": _TABLE_CELL,
        "thead": _TABLE_SECTION,
        "time": _attrs("datetime"),
        "tr": _attrs("align", "valign"),
        "u": None,
        "ul": None,
        "wbr": None,
    }
)

HTML5_PROFILE = PolicyProfile(
    name="html5",
    tags=HTML5_TAGS,
    global_attributes=HTML5_GLOBAL_ATTRIBUTES,
    structural_prefixes=("data-", "aria-"),
)

BASIC_PROFILE = PolicyProfile(
    name="basic",
    tags=BASIC_TAGS,
    global_attributes=BASIC_GLOBAL_ATTRIBUTES,
    structural_prefixes=("data-",),
)

PROFILES: Mapping[str, PolicyProfile] = MappingProxyType(
    {profile.name: profile for profile in (HTML5_PROFILE, BASIC_PROFILE)}
)

DEFAULT_PROFILE_NAME = HTML5_PROFILE.name


def get_profile(name: str) -> PolicyProfile:
    """Look up a built-in profile by name.

    Raises:
        UnknownProfileError: If no profile has that name.
    """
    try:
        return PROFILES[name]
    except KeyError:
        raise UnknownProfileError(name) from None
