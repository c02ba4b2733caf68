"""Transactional e-mail delivery."""
