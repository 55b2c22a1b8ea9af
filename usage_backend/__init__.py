"""Usage backend: user registrations, activity events and admin stats."""
