"""
Answer text assembly for retrieval results.

Builds the user-visible chat text from ranked passages, plus the fixed
texts used when a document is not answerable yet or retrieval fails.
Output is a list of fragments so the responder can stream it piecewise.

Dependencies: docchat.boundary.vdb.vector_schemas
System role: Response composition for the chat responder
"""

from docchat.boundary.vdb.vector_schemas import VectorSearchResult
from docchat.core.exceptions import DocChatException

NOT_READY_TEXT = (
    "I can see you've uploaded a PDF, but it's still being processed. "
    "Please wait a moment and try again."
)
NO_CONTENT_TEXT = "I couldn't find specific content related to your question."


class AnswerBuilder:
    """Compose responder text from search results."""

    def __init__(self, snippet_length: int = 200) -> None:
        """
        Args:
            snippet_length: Characters quoted from each passage
        """
        if snippet_length <= 0:
            raise ValueError("snippet_length must be positive")
        self._snippet_length = snippet_length

    def not_ready(self) -> str:
        return NOT_READY_TEXT

    def degraded(self, document_name: str, error: BaseException | str) -> str:
        cause = error.message if isinstance(error, DocChatException) else error
        return (
            f'I can see your PDF "{document_name}" but I\'m having trouble searching '
            f"through it right now. The error was: {cause}"
        )

    def fragments(
        self,
        document_name: str,
        question: str,
        results: list[VectorSearchResult],
    ) -> list[str]:
        """
        Build the answer as ordered fragments.

        The first fragment is the header; each following fragment quotes
        one passage with its page number.

        Args:
            document_name: Display name of the document
            question: User question, echoed in the header
            results: Passages ranked by relevance

        Returns:
            list[str]: Fragments whose concatenation is the full answer
        """
        header = (
            f'I found {len(results)} relevant sections in your PDF "{document_name}" '
            f'related to "{question}". '
        )
        if not results:
            return [header + NO_CONTENT_TEXT]

        parts = [header + "Here's what I found:\n\n"]
        for index, result in enumerate(results, start=1):
            snippet = result.text[: self._snippet_length]
            parts.append(f"**Section {index} (page {result.provenance.page}):**\n{snippet}...\n\n")
        return parts

    def compose(self, document_name: str, question: str, results: list[VectorSearchResult]) -> str:
        return "".join(self.fragments(document_name, question, results))
