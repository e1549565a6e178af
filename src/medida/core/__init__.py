"""Medida Core - Supabase access shared by all modules."""
