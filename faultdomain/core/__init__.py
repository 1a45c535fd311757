# faultdomain/core/__init__.py
"""
faultdomain core

- domain: isolation contexts and the ambient domain stack
- scheduler: loop bridge and the loop-level fault dispatcher
- errors: the package's own exception type and codes
"""
