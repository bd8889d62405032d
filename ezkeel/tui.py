"""Terminal rendering of deploy progress and summaries."""

from __future__ import annotations

import os
import re
import sys
import unicodedata
from dataclasses import dataclass, field
from enum import Enum

GREEN = "#00ff88"
DIM = "#666666"
WHITE = "#ffffff"
RED = "#ff4444"
BRAND = "⟩_"

ICON_DONE = "✓"
ICON_FAIL = "✗"
ICON_ACTIVE = "●"
ICON_PENDING = "○"
ICON_LIVE = "🟢"
ICON_DOWN = "🔴"

_RESET = "\x1b[0m"
_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def _colors_enabled() -> bool:
    if "NO_COLOR" in os.environ:
        return False
    try:
        return bool(sys.stdout.isatty())
    except (AttributeError, ValueError):
        return False


def _visible_width(text: str) -> int:
    width = 0
    for char in _ANSI.sub("", text):
        if unicodedata.combining(char):
            continue
        width += 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1
    return width


def _sgr(color: str | None, bold: bool) -> str:
    codes = ["1"] if bold else []
    if color:
        red, green, blue = (int(color[i:i + 2], 16) for i in (1, 3, 5))
        codes.append(f"38;2;{red};{green};{blue}")
    return f"\x1b[{';'.join(codes)}m"


@dataclass(frozen=True)
class Style:
    """Text colour, weight and an optional rounded border with padding."""

    foreground: str | None = None
    bold: bool = False
    border: bool = False
    border_foreground: str | None = None
    padding: tuple[int, int] = (0, 0)

    def render(self, text: str) -> str:
        """Return ``text`` drawn in this style.

        Colours are only emitted when stdout is a terminal and NO_COLOR is unset.
        """
        color = _colors_enabled()
        lines = text.split("\n")
        if color and (self.foreground or self.bold):
            start = _sgr(self.foreground, self.bold)
            lines = [f"{start}{line}{_RESET}" if line else line for line in lines]

        vertical, horizontal = self.padding
        if not (self.border or vertical or horizontal):
            return "\n".join(lines)

        width = max(_visible_width(line) for line in lines)
        inner = width + 2 * horizontal
        pad = " " * horizontal
        body = [pad + line + " " * (width - _visible_width(line)) + pad for line in lines]
        blank = " " * inner
        body = [blank] * vertical + body + [blank] * vertical

        if self.border:
            def paint(segment: str) -> str:
                if color and self.border_foreground:
                    return f"{_sgr(self.border_foreground, False)}{segment}{_RESET}"
                return segment

            side = paint("│")
            body = [
                paint("╭" + "─" * inner + "╮"),
                *(side + line + side for line in body),
                paint("╰" + "─" * inner + "╯"),
            ]
        return "\n".join(body)


GREEN_STYLE = Style(foreground=GREEN)
DIM_STYLE = Style(foreground=DIM)
BOLD_STYLE = Style(bold=True)
ERROR_STYLE = Style(foreground=RED)
BOX_STYLE = Style(border=True, border_foreground=GREEN, padding=(1, 2))
FAILURE_BOX_STYLE = Style(border=True, border_foreground=RED, padding=(1, 2))


class StepStatus(Enum):
    """The state of one deploy step."""

    PENDING = 0
    ACTIVE = 1
    DONE = 2
    FAILED = 3


@dataclass
class DeployStep:
    """One step in the deploy pipeline."""

    label: str
    status: StepStatus = StepStatus.PENDING
    message: str = ""


@dataclass
class DeployModel:
    """The progress of a deploy, step by step."""

    app_name: str
    steps: list[DeployStep] = field(default_factory=list)

    def _step(self, index: int) -> DeployStep | None:
        if 0 <= index < len(self.steps):
            return self.steps[index]
        return None

    def start_step(self, index: int) -> None:
        """Mark step ``index`` active; out-of-range indexes are ignored."""
        step = self._step(index)
        if step is not None:
            step.status = StepStatus.ACTIVE

    def complete_step(self, index: int, message: str = "") -> None:
        """Mark step ``index`` done, shown with ``message`` when given."""
        step = self._step(index)
        if step is not None:
            step.status = StepStatus.DONE
            step.message = message

    def fail_step(self, index: int, error_message: str) -> None:
        """Mark step ``index`` failed with ``error_message``."""
        step = self._step(index)
        if step is not None:
            step.status = StepStatus.FAILED
            step.message = error_message

    def view(self) -> str:
        """Render the progress as a boxed list of steps."""
        parts = [BOLD_STYLE.render("deploying " + self.app_name), "\n\n"]
        for step in self.steps:
            if step.status is StepStatus.DONE:
                display = step.message or step.label
                parts.append(GREEN_STYLE.render(f"{ICON_DONE} {display}") + "\n")
            elif step.status is StepStatus.ACTIVE:
                parts.append(GREEN_STYLE.render(f"{ICON_ACTIVE} {step.label}") + "\n")
            elif step.status is StepStatus.PENDING:
                parts.append(DIM_STYLE.render(f"{ICON_PENDING} {step.label}") + "\n")
            else:
                parts.append(ERROR_STYLE.render(f"{ICON_FAIL} {step.label}") + "\n")
                if step.message:
                    parts.append(ERROR_STYLE.render("  " + step.message) + "\n")
        return BOX_STYLE.render("".join(parts))


@dataclass
class DeployResult:
    """The outcome of a successful deployment."""

    app_name: str
    url: str
    server: str
    stack: str
    time_sec: int


def new_deploy_model(app_name: str, steps: list[str]) -> DeployModel:
    """Return a model with every step pending."""
    return DeployModel(app_name=app_name, steps=[DeployStep(label=label) for label in steps])


def render_success(result: DeployResult) -> str:
    """Render a boxed summary of a successful deploy."""
    text = "".join(
        [
            GREEN_STYLE.render(f"{ICON_DONE} {result.app_name} deployed"),
            "\n\n",
            DIM_STYLE.render("url:    ") + result.url + "\n",
            DIM_STYLE.render("server: ") + result.server + "\n",
            DIM_STYLE.render("stack:  ") + result.stack + "\n",
            DIM_STYLE.render("time:   ") + f"{result.time_sec}s",
        ]
    )
    return BOX_STYLE.render(text)


def render_failure(app_name: str, error_message: str) -> str:
    """Render a boxed summary of a failed deploy."""
    text = (
        ERROR_STYLE.render(f"{ICON_FAIL} {app_name} deploy failed")
        + "\n\n"
        + ERROR_STYLE.render(error_message)
    )
    return FAILURE_BOX_STYLE.render(text)


def banner() -> str:
    """Return the product banner."""
    return GREEN_STYLE.render(BRAND + " ezkeel")