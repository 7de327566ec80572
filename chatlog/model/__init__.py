"""Contacts, chat rooms, sessions, media and messages, with the per-version rows they are built from."""