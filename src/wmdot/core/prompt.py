"""Interactive confirmation prompts."""

from __future__ import annotations

from typing import Callable, Optional

from rich.console import Console

# Confirmers take a question and return True for yes
Confirmer = Callable[[str], bool]


def parse_answer(answer: str) -> Optional[bool]:
    """Interpret a yes/no answer.

    Returns True for anything starting with y or Y, False for a blank answer
    or anything starting with n or N, and None when the answer is unclear.
    """
    answer = answer.strip()
    if not answer or answer[0] in "nN":
        return False
    if answer[0] in "yY":
        return True
    return None


def confirm(question: str, console: Optional[Console] = None) -> bool:
    """Ask a yes/no question until the answer is clear.

    A blank answer means no, and so does end of input. There is no timeout.
    Questions go to stderr unless ``console`` says otherwise, so they stay
    visible when stdout is redirected.
    """
    console = console or Console(stderr=True, soft_wrap=True)
    while True:
        try:
            answer = parse_answer(console.input(f"{question} [y/N] ", markup=False))
        except EOFError:
            console.print()
            return False
        if answer is not None:
            return answer
        console.print("Please answer yes or no.", markup=False)


def console_confirmer(console: Optional[Console] = None) -> Confirmer:
    """Return a confirmer bound to ``console``, stderr by default."""

    def _confirm(question: str) -> bool:
        return confirm(question, console)

    return _confirm
