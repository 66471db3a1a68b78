"""Custom completer for the speed test CLI."""

from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, SIZE_PRESETS

SIZED_COMMANDS = ("download", "upload")


class SpeedtestCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Preset size completion for the 'download' and 'upload' argument
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        if command not in SIZED_COMMANDS:
            return

        argument_count = len(tokens) - 1 if not is_typing_new_token else len(tokens)
        if argument_count > 1:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        yield from self._complete_sizes(current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_sizes(self, partial: str) -> Iterable[Completion]:
        """Complete preset transfer sizes."""
        partial_lower = partial.lower()
        for size in SIZE_PRESETS:
            if size.lower().startswith(partial_lower):
                yield Completion(size, start_position=-len(partial))
