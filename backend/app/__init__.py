"""TodoDrive: todo list and file drop backed by Supabase."""

__version__ = "0.1.0"
