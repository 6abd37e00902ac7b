DEFAULT_DAILY_CLAIM_BONUS = 15
