"""
Test suite for query-relevant window extraction.

System role: Verification of retrieval passage trimming
"""

from content_index.core.relevance import extract_relevant_window, query_terms


class TestQueryTerms:
    """Test suite for query_terms."""

    def test_short_words_should_be_dropped(self) -> None:
        """Test words of two characters or less are ignored."""
        assert query_terms("Is it on the Roadmap?") == ["the", "roadmap"]

    def test_terms_should_be_lowercased_and_distinct(self) -> None:
        """Test case folding and de-duplication."""
        assert query_terms("Budget budget BUDGET review") == ["budget", "review"]


class TestExtractRelevantWindow:
    """Test suite for extract_relevant_window."""

    def test_short_content_should_be_returned_unchanged(self) -> None:
        """Test content within the window is untouched."""
        content = "A short note about lunch."
        assert extract_relevant_window(content, "lunch", window=1500) == content

    def test_window_with_most_terms_should_win(self) -> None:
        """Test the window containing the query words is selected."""
        # Arrange
        content = "." * 3000 + " Quarterly BUDGET review notes " + "." * 3000

        # Act
        passage = extract_relevant_window(content, "budget review", window=1500, stride=100)

        # Assert
        assert len(passage) == 1500
        assert "BUDGET review" in passage

    def test_no_matching_terms_should_return_first_window(self) -> None:
        """Test ties (including zero matches) keep the first window."""
        # Arrange
        content = "abc" * 1000

        # Act
        passage = extract_relevant_window(content, "zzz", window=1500, stride=100)

        # Assert
        assert passage == content[:1500]

    def test_tail_of_content_should_be_reachable(self) -> None:
        """Test a term in the last characters is found via the end-aligned window."""
        # Arrange
        content = "." * 1650 + "deadline"

        # Act
        passage = extract_relevant_window(content, "deadline", window=1500, stride=100)

        # Assert
        assert passage.endswith("deadline")
        assert len(passage) == 1500
