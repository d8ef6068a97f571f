"""
Firestore query helpers.

NOTE: firebase_admin still accepts positional where() arguments; the
keyword-filter API only changes the deprecation warning, not behaviour.
Routing every filter through here keeps a single place to switch.
"""


def where_filter(query, field_path: str, op_string: str, value):
    """
    Apply one equality/comparison filter to a collection or query.

    Usage:
        query = where_filter(collection, "is_public", "==", True)
        query = where_filter(query, "category", "==", "theft")
    """
    return query.where(field_path, op_string, value)
