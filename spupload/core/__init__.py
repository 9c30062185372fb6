"""Core subsystems of spupload."""
