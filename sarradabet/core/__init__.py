"""Pure building blocks for the SarradaBet API.

- ``odds_math``: implied probability and the odds realism check
- ``pagination``: page/limit/sort parameters and the ``meta`` block

Nothing in this package imports from ``sarradabet.services``,
``sarradabet.repositories`` or ``sarradabet.models``.
"""
