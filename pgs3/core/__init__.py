"""Core building blocks shared by every transport: settings, enums and exceptions."""
