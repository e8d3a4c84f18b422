"""Folio - multi-tenant personal investment tracking."""
