"""
A structural type checker with subtyping and equi-recursive record types.
"""
