"""
QuickAsk — Backend for a Question-and-Answer Community
=======================================================
Users post questions, answer them, like or dislike answers and favorite
questions.  Participation earns points, and every hundred points of
progress earns a level.

Package layout::

    quickask/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Level span, field limits, defaults
    ├── errors.py          # Service error taxonomy (→ HTTP status)
    ├── reconcile.py       # python -m quickask.reconcile (one-off pass)
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   └── models.py      # Users, questions, answers, reactions, favorites, point log
    ├── engine/
    │   ├── events.py      # RewardEvent dataclass + base point values
    │   ├── ledger.py      # Points → level/progress with single carry
    │   ├── reactions.py   # Like/dislike tri-state transitions
    │   └── favorites.py   # Favorite flip
    ├── services/
    │   ├── reward_service.py         # Ledger application + point log
    │   ├── reaction_service.py       # Locked like/dislike toggles
    │   ├── favorite_service.py       # Favorite toggle + listing
    │   ├── question_service.py       # Question CRUD + listings
    │   ├── answer_service.py         # Answers + reaction flags
    │   ├── user_service.py           # Accounts, profile, statistics
    │   ├── listing.py                # Question/answer dict serialization
    │   └── reconciliation_service.py # likes counter repair
    └── api/
        ├── main.py        # FastAPI app + error envelope
        ├── auth.py        # Phone/password → JWT
        ├── deps.py        # Engine, config, access gate, pagination
        ├── tasks.py       # Periodic like reconciliation loop
        └── routes/        # Questions, answers, favorites, users
"""

__version__ = "0.1.0"
