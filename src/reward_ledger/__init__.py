"""Points ledger and voucher redemption service."""
