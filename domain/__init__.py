"""Pure helpers: request models, canned pattern analysis and report formatting."""
