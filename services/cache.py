"""
View Cache

Read views of ordered collections are cached under a scope tag. Any write to
a scope deletes its tag so the next read is rebuilt from the database.
"""

import logging

from flask_caching import Cache

logger = logging.getLogger(__name__)

# Initialized with the Flask app in app.py
cache = Cache()


def template_items_tag(template_id):
    return f'template-items-{template_id}'


def program_structure_tag(program_id):
    return f'program-structure-{program_id}'


def meal_template_items_tag(meal_id):
    return f'meal-template-items-{meal_id}'


def cached_view(tag, build):
    """Return the cached payload for tag, building and storing it on a miss."""
    payload = cache.get(tag)
    if payload is None:
        payload = build()
        cache.set(tag, payload)
    return payload


def invalidate(tag):
    """
    Drop a cached view. Fire-and-forget: a failure is logged and never undoes
    the write that triggered it.
    """
    try:
        cache.delete(tag)
    except Exception:
        logger.exception('Cache invalidation failed for %s', tag)
        return False
    logger.debug('Invalidated %s', tag)
    return True
