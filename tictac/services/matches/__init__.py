"""Match domain services: board rules, transitions, settlement, payouts.

The pure modules here (board, state_machine, settlement, practice) know
nothing about Flask or the database. HTTP routes and socket handlers load
a row, ask the state machine for an update, apply it and persist it.
"""
