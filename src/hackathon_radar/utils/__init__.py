"""Pure helpers shared by sources."""
