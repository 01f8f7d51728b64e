"""Infrastructure: external collaborator contracts and the session client"""
