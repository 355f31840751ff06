"""
Shared constants for the repair-shop tracker: the allowed values of the
string-backed enums, CSV column layouts, upload limits and role names.
Values that operators may tune come from the environment (.env).
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Roles stored on User.role
ROLE_ADMIN = "admin"
ROLE_USER = "user"

# Canonical spellings; parsing is case-insensitive
EXPENSE_TYPES = ("Parts", "Labor", "Service")
JOB_STATUSES = ("Quote", "InProgress", "Completed", "Invoiced", "Paid")

# Field limits (shared by request schemas and the CSV importer)
EXPENSE_DESCRIPTION_MAX = 500
EXPENSE_RECEIPT_MAX = 200
AMOUNT_DECIMALS = 2
JOB_TEXT_MAX = 200
JOB_DESCRIPTION_MAX = 2000
CUSTOMER_NAME_MAX = 200
CUSTOMER_EMAIL_MAX = 200
CUSTOMER_PHONE_MAX = 50
CUSTOMER_ADDRESS_MAX = 500
CUSTOMER_NOTES_MAX = 2000

# CSV import layout (header row, fixed order; last column optional)
EXPENSE_IMPORT_COLUMNS = (
    "Job ID", "Type", "Description", "Amount", "Date", "Receipt Reference"
)

# CSV export layouts
EXPENSE_EXPORT_COLUMNS = (
    "Expense ID", "Job ID", "Type", "Description", "Amount", "Date",
    "Receipt Reference", "Created At", "Updated At",
)
JOB_EXPORT_COLUMNS = (
    "Job ID", "Customer ID", "Customer Name", "Equipment Type",
    "Equipment Model", "Description", "Status", "Date Received",
    "Date Completed", "Estimate Amount", "Actual Amount", "Total Cost",
    "Profit Margin", "Created At", "Updated At",
)

# Upload limit for /api/import (default 10 MB)
CSV_IMPORT_MAX_FILE_SIZE_BYTES = int(
    os.getenv("CSV_IMPORT_MAX_FILE_SIZE_BYTES", str(10 * 1024 * 1024))
)
