"""Interactive command-line chat.

Keeps a single thread for the whole session; type ``bye`` to quit.
"""

from typing import Callable, Optional
from uuid import uuid4

from buddy_ai.agents.buddy_agent import BuddyAgent
from buddy_ai.api import service
from buddy_ai.domain.exceptions import BusinessError


EXIT_COMMAND = "bye"


def chat_loop(
    agent: BuddyAgent,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
    thread_id: Optional[str] = None,
) -> int:
    """Run the REPL until ``bye`` or EOF; return the number of turns answered."""
    thread = thread_id or f"cli-{uuid4().hex}"
    answered = 0
    while True:
        try:
            question = read("You: ")
        except EOFError:
            break
        question = question.strip()
        if question == EXIT_COMMAND:
            break
        if not question:
            continue
        try:
            result = agent.chat(user_input=question, thread_id=thread)
        except BusinessError as e:
            write(f"Error [{e.code}]: {e.message}")
            continue
        write(f"Assistant: {result.content}")
        answered += 1
    return answered


def main() -> None:
    chat_loop(service.get_default_agent())


if __name__ == "__main__":
    main()
