"""
Validation des termes de recherche.
"""

from arrlink.core.errors import InvalidSearchQueryError

MIN_QUERY_LENGTH = 2
MAX_QUERY_LENGTH = 200


def validate_search_query(query: str) -> str:
    """
    Nettoie et valide un terme de recherche avant tout appel reseau.

    Returns:
        Le terme sans espaces superflus

    Raises:
        InvalidSearchQueryError: Terme trop court ou trop long
    """
    cleaned = (query or "").strip()
    if len(cleaned) < MIN_QUERY_LENGTH:
        raise InvalidSearchQueryError(
            f"Search query must be at least {MIN_QUERY_LENGTH} characters"
        )
    if len(cleaned) > MAX_QUERY_LENGTH:
        raise InvalidSearchQueryError(
            f"Search query must be at most {MAX_QUERY_LENGTH} characters"
        )
    return cleaned
