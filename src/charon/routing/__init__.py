"""Routing — exact-match route table and the handler contract.

Routes are registered during setup and frozen when the dispatcher is
created.
"""
