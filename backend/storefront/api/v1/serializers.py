"""
Response serialisation for API v1.

Models are turned into plain dicts with camelCase keys. Only attributes
that were loaded explicitly are touched.
"""

from datetime import datetime
from typing import Any

from storefront.models.community import Answer, Comment, ProductQuestion, Question
from storefront.models.shop import Category, Order, OrderItem, Payment, Product
from storefront.models.user import User


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "fullName": user.full_name,
        "roles": user.roles,
        "isAdmin": user.is_admin,
    }


def category_to_dict(category: Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
    }


def product_to_dict(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": float(product.price),
        "stockQuantity": product.stock_quantity,
        "inStock": product.is_in_stock,
        "featured": product.is_featured,
        "mainImageUrl": product.main_image_url,
        "additionalImages": product.image_urls,
        "category": category_to_dict(product.category) if product.category else None,
        "createdAt": _iso(product.created_at),
    }


def payment_to_dict(payment: Payment) -> dict[str, Any]:
    return {
        "id": payment.id,
        "userId": payment.user_id,
        "amount": float(payment.amount),
        "status": payment.status.value,
        "paymentMethod": payment.method.value,
        "maskedCardNumber": payment.masked_card_number,
        "transactionReference": payment.transaction_reference,
        "createdAt": _iso(payment.created_at),
        "processedAt": _iso(payment.processed_at),
    }


def order_item_to_dict(item: OrderItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "productId": item.product_id,
        "productName": item.product_name,
        "productImageUrl": item.product_image_url,
        "quantity": item.quantity,
        "price": float(item.price),
        "subtotal": float(item.subtotal),
    }


def order_to_dict(order: Order) -> dict[str, Any]:
    return {
        "id": order.id,
        "userId": order.user_id,
        "status": order.status.value,
        "total": float(order.total),
        "orderItems": [order_item_to_dict(item) for item in order.items],
        "payment": payment_to_dict(order.payment) if order.payment else None,
        "shippingName": order.shipping_name,
        "shippingAddress": order.shipping_address,
        "shippingCity": order.shipping_city,
        "shippingState": order.shipping_state,
        "shippingZip": order.shipping_zip,
        "shippingCountry": order.shipping_country,
        "createdAt": _iso(order.created_at),
        "updatedAt": _iso(order.updated_at),
    }


def comment_to_dict(comment: Comment) -> dict[str, Any]:
    return {
        "id": comment.id,
        "productId": comment.product_id,
        "text": comment.text,
        "rating": comment.rating,
        "authorName": comment.author_name,
        "authorEmail": comment.author_email,
        "starred": comment.starred,
        "createdAt": _iso(comment.created_at),
    }


def answer_to_dict(answer: Answer) -> dict[str, Any]:
    return {
        "id": answer.id,
        "questionId": answer.question_id,
        "adminId": answer.admin_id,
        "text": answer.text,
        "createdAt": _iso(answer.created_at),
    }


def question_to_dict(question: Question) -> dict[str, Any]:
    return {
        "id": question.id,
        "productId": question.product_id,
        "userId": question.user_id,
        "text": question.text,
        "answer": answer_to_dict(question.answer) if question.answer else None,
        "createdAt": _iso(question.created_at),
    }


def product_question_to_dict(question: ProductQuestion) -> dict[str, Any]:
    return {
        "id": question.id,
        "productId": question.product_id,
        "userId": question.user_id,
        "question": question.question,
        "answer": question.answer,
        "answeredById": question.answered_by_id,
        "askedAt": _iso(question.asked_at),
        "answeredAt": _iso(question.answered_at),
        "answered": question.answered,
        "publicQuestion": question.public_question,
        "helpfulVotes": question.helpful_votes,
        "reportCount": question.report_count,
        "active": question.active,
    }
