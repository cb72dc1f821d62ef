"""
Community Module - Product comments and Q&A.

Features:
- Rated comments with starring
- General questions answered once by an admin
- Product questions with helpful votes and report-based hiding
"""

from storefront.modules.community.comments import CommentService
from storefront.modules.community.product_questions import ProductQuestionService
from storefront.modules.community.questions import QuestionService

__all__ = [
    "CommentService",
    "ProductQuestionService",
    "QuestionService",
]
