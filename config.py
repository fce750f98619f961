"""Configuration for the DEX arbitrage checker"""
import os

from dotenv import load_dotenv

# Values in a local .env file fill in anything not already in the environment
load_dotenv()

# ============================================================
# OPERATION MODE
# ============================================================
# Options:
# - "sheets": Read price rows from a Google Sheet (production)
# - "simulation": Generate mock price rows (for testing without credentials)
MODE = os.getenv("MODE", "sheets")

# Web server settings
WEB_HOST = os.getenv("WEB_HOST", "0.0.0.0")
WEB_PORT = int(os.getenv("PORT", "5000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ============================================================
# VENUES
# ============================================================
# Column D of the sheet is venue A, column E is venue B
VENUE_NAMES = {
    "A": os.getenv("VENUE_A_NAME", "PancakeSwap"),
    "B": os.getenv("VENUE_B_NAME", "BakerySwap"),
}

# Minimum price difference (quote units) to flag as opportunity.
# 0.0 reports every strictly positive spread.
MIN_PROFIT_THRESHOLD = float(os.getenv("MIN_PROFIT_THRESHOLD", "0.0"))

# ============================================================
# GOOGLE SHEETS
# ============================================================
SPREADSHEET_ID = os.getenv("SPREADSHEET_ID")
GOOGLE_CREDENTIALS = os.getenv("GOOGLE_CREDENTIALS")  # Service account JSON
SHEET_RANGE = os.getenv("SHEET_RANGE", "Sheet1!A:E")
SHEET_HEADER_ROWS = int(os.getenv("SHEET_HEADER_ROWS", "0"))
SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Seconds to wait for the sheet before giving up on a request
FETCH_TIMEOUT_S = float(os.getenv("FETCH_TIMEOUT_S", "10"))

# Token pairs generated in simulation mode
TRADING_PAIRS = [
    "BNB/USDT",
    "CAKE/BNB",
    "ETH/USDT",
    "BTCB/USDT",
]
