"""
Stable Kernel Layer

Foundational pieces the engines build on:
- Data models (users, questions, answers, notifications)
- EntityStore port with optimistic-versioned commits
- Domain events
- Identity Core (accounts, password hashing, JWT)
"""
