"""
Domain helpers for presenting aggregated results.
"""

from .paging import ItemPage, page_to_dict, paginate

__all__ = ["ItemPage", "paginate", "page_to_dict"]
