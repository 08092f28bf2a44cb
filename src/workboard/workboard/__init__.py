"""WorkBoard package.

Tracks workers, the work they perform and the payments made to them.
Organized by feature modules (workers, ledger, cascade, reports, auth) with a
thin Flask controller layer over async service/store layers.
"""
