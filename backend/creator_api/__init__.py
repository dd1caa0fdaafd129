"""Creator Studio API: quota-limited AI generation with encrypted per-user API keys"""
