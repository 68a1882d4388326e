"""Draft release domain.

- version: manifest version resolution
- notes: PR grouping and release body rendering
- templates: closed $VAR substitution per template kind
- reconcile: create-or-update decision for the branch draft
"""

from __future__ import annotations
