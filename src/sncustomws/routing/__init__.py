"""Routing — override resolution and a compiled route table.

Controllers are scanned into route candidates, conflicting candidates are
resolved by priority, and the survivors are compiled into an immutable
trie that the request handler matches against.
"""
