# faultdomain/api/__init__.py
"""
faultdomain user-facing API

1. wrap - fence one callback-style call into its callback
2. run / try_catch - error-first combinators over wrap
3. bind - keep listeners attributed to the domain that registered them
4. acall - await a wrapped call
"""

from .wrap import wrap
from .run import run, try_catch
from .bind import bind
from .aio import acall

__all__ = [
    "wrap",
    "run",
    "try_catch",
    "bind",
    "acall",
]
