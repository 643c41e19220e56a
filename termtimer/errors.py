from typing import List, Optional

DEVELOPER_ADVICE = "Try notifying the developer"


class HumanError(Exception):
    """An error with a short title and advice on how to fix it.

    Lower-level causes are attached with ``raise ... from cause`` and shown
    when the error is rendered.
    """

    kind = "error"

    def __init__(self, title: str, advice: str) -> None:
        super().__init__(title)
        self.title = title
        self.advice = advice

    def __str__(self) -> str:
        return self.title


class UserError(HumanError):
    kind = "user"


class SystemFault(HumanError):
    kind = "system"

    def __init__(self, title: str, advice: str = DEVELOPER_ADVICE) -> None:
        super().__init__(title, advice)


def _cause_chain(err: BaseException) -> List[BaseException]:
    chain = []
    cause: Optional[BaseException] = err.__cause__
    while cause is not None and cause not in chain:
        chain.append(cause)
        cause = cause.__cause__
    return chain


def _describe(err: BaseException) -> str:
    if isinstance(err, HumanError):
        return err.title
    text = str(err)
    if not text:
        return type(err).__name__
    return f"{text} ({type(err).__name__})"


def render_error(err: HumanError) -> str:
    chain = _cause_chain(err)
    advice = [err.advice]
    for cause in chain:
        if isinstance(cause, HumanError) and cause.advice not in advice:
            advice.append(cause.advice)

    lines = [f"Oh no! {err.title}"]
    if chain:
        lines.append("")
        lines.append("This was caused by:")
        lines.extend(f" - {_describe(cause)}" for cause in chain)
    lines.append("")
    lines.append("To try and fix this, you can:")
    lines.extend(f" - {item}" for item in advice)
    return "\n".join(lines)
