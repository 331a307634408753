"""CSV export helpers.

Summary tables are written as one folder per entity (vendor, department,
category, ...) holding one CSV per breakdown. All writes go through
`write_csv_if_enabled` so a run can be made without touching the files.
"""
