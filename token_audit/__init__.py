"""
token_audit - stylesheet token consolidation pipeline

Stages:
- extractors: scan stylesheets into baseline.json / baseline.csv
- similarity: exact and near-duplicate token groups
- reports: duplicate-report.md, disposition filler, replace-map
- rewriters: rename and prune codemods
"""

__version__ = '1.0.0'
