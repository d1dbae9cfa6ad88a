"""Task IR: the closed set of actions a task file may contain."""

from __future__ import annotations

import dataclasses
from dataclasses import field
from typing import Union

from pydantic import ConfigDict, NonNegativeInt
from pydantic.dataclasses import dataclass

# Wire values are checked as-is: "5" is not a number and "true" is not a bool.
_STRICT = ConfigDict(strict=True)


@dataclass(frozen=True, config=_STRICT)
class GoTo:
    url: str


@dataclass(frozen=True, config=_STRICT)
class Click:
    selector: str


@dataclass(frozen=True, config=_STRICT)
class Input:
    """Replace the value of a form field."""

    selector: str
    text: str


@dataclass(frozen=True, config=_STRICT)
class Extract:
    """Read text (or an attribute when given) from the first matching element."""

    selector: str
    attribute: str | None = None


@dataclass(frozen=True, config=_STRICT)
class Wait:
    milliseconds: NonNegativeInt


@dataclass(frozen=True, config=_STRICT)
class Login:
    """Open a login page, fill credentials and submit the form."""

    url: str
    username_selector: str
    password_selector: str
    username: str
    password: str = field(repr=False)
    submit_selector: str


@dataclass(frozen=True, config=_STRICT)
class Navigate:
    """Follow a URL stored in an element attribute (usually a link href)."""

    selector: str
    attribute: str


@dataclass(frozen=True, config=_STRICT)
class FillCheckbox:
    selector: str
    checked: bool


@dataclass(frozen=True, config=_STRICT)
class SelectDropdown:
    selector: str
    option: str  # Option value or visible label


@dataclass(frozen=True, config=_STRICT)
class Hover:
    selector: str


@dataclass(frozen=True, config=_STRICT)
class DoubleClick:
    selector: str


@dataclass(frozen=True, config=_STRICT)
class RightClick:
    selector: str


@dataclass(frozen=True, config=_STRICT)
class RunScript:
    script: str


@dataclass(frozen=True, config=_STRICT)
class DownloadFile:
    url: str
    dist_path: str  # Local destination


Action = Union[
    GoTo,
    Click,
    Input,
    Extract,
    Wait,
    Login,
    Navigate,
    FillCheckbox,
    SelectDropdown,
    Hover,
    DoubleClick,
    RightClick,
    RunScript,
    DownloadFile,
]

# Wire discriminant -> action class
ACTION_TYPES: dict[str, type] = {
    cls.__name__: cls
    for cls in (
        GoTo,
        Click,
        Input,
        Extract,
        Wait,
        Login,
        Navigate,
        FillCheckbox,
        SelectDropdown,
        Hover,
        DoubleClick,
        RightClick,
        RunScript,
        DownloadFile,
    )
}


@dataclasses.dataclass(frozen=True)
class ScrapingTask:
    """A named, ordered sequence of actions run against one browser session."""

    name: str
    actions: tuple[Action, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "actions", tuple(self.actions))
