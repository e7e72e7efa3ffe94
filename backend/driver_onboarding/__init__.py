"""Driver onboarding: asynchronous document validation for driver registrations."""
