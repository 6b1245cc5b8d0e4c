from forum_search.models.forum import Forum, ForumCreate, ForumResult, ForumUpdate

__all__ = ["Forum", "ForumCreate", "ForumResult", "ForumUpdate"]
