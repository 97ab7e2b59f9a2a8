"""
Notes API - Pagination & Filtering Query Contract
=================================================

    cursor.py      opaque (created_at, id) tokens
    tag_filter.py  tagsAny / tagsAll predicates and input parsing
    composer.py    filters + cursor seek + canonical order + limit
"""
