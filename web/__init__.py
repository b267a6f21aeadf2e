"""
HTTP download surface for generated reports and bundles.
"""
