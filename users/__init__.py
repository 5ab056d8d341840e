"""Users app: profiles, presence fields and the user directory endpoint."""
