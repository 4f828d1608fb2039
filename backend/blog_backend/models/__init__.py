from blog_backend.models.blog import Blog, BlogStatus
from blog_backend.models.user import User

__all__ = ["Blog", "BlogStatus", "User"]
