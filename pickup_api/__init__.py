"""
Pickup Games API

Responsibilities:
- Game registry (create, get, list upcoming games by category)
- Roster engine (register/drop with waitlist promotion, optimistic concurrency)
- Requester identity from the gateway's verified claim
- Roster event fan-out over Redis
"""
