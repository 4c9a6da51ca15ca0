"""Cross-cutting infrastructure: settings, logging, database, errors, i18n."""
