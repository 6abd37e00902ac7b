MATCH_STATUS_PENDING = "pending"
MATCH_STATUS_APPROVED = "approved"
MATCH_STATUS_REJECTED = "rejected"

WIN_POINTS = 50
LOSS_POINTS = 20
