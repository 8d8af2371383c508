"""Command line interface (`lingua`)."""
