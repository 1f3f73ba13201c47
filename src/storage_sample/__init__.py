"""Provision, inspect and update a throwaway Azure storage account."""
