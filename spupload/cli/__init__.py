"""spupload command line interface."""
