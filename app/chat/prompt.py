"""
Prompt Template Module

Builds the single prompt sent to the generation backend for a chat turn.

Prompt layout:
- Policy: fixed instructions keeping the assistant on the shop's domain
- Data: a human-readable summary of the catalog snapshot
- Question: the user's message, appended verbatim

Variables in templates:
{store_name} - Shop name
{policy} - Rendered policy block
{data} - Rendered catalog summary
{message} - User message

The user message is not sanitized before it is concatenated, so a message can
try to override the policy block.
"""

from typing import List

from app.core.config import settings
from app.core.logging import get_logger
from app.models.catalog import CatalogSnapshot
from app.utils.text import format_number

logger = get_logger(__name__)

# Upper bound on products listed in the prompt, whatever the settings say
MAX_SAMPLE_PRODUCTS = 5


class PromptTemplate:
    """Base prompt template"""

    def __init__(self, template: str, description: str = ""):
        """
        Initialize prompt template.

        Args:
            template: Template string with {variable} placeholders
            description: Description of the template
        """
        self.template = template
        self.description = description

    def format(self, **kwargs) -> str:
        """Format template with provided variables"""
        try:
            return self.template.format(**kwargs)
        except KeyError as e:
            logger.warning(f"Missing variable in template: {e}")
            raise


class PromptTemplates:
    """Collection of prompt templates for the shop assistant"""

    # Policy - sets assistant role and limits
    POLICY_PROMPT = PromptTemplate(
        template="""You are the {store_name} Assistant, the virtual assistant of an electronics shop application.

YOUR ROLE:
- You assist an electronics shop that sells a wide range of electronic products.
- You help customers and admins with information about products, categories and prices.
- You can recommend products based on a customer's needs.
- You can analyse sales data and give insights to improve sales.

YOUR CAPABILITIES:
- Give complete information about products in the shop (name, category, price, features).
- Compare products within the same category.
- Recommend products based on budget, needs or preferences.
- Explain features and specifications of electronic products.
- Help with questions about the purchase process, availability or product categories.
- Give insights about sales trends and product performance (for admins).

IMPORTANT LIMITS:
- You ONLY answer questions about the electronics shop, its products and related services.
- You REFUSE every question unrelated to the electronics shop, for example politics, news, health, personal finance or any other topic outside the shop.
- When asked about an off-topic subject, politely say that you only help with the electronics shop and its products.
- AVOID speculative answers about products or prices that are not in the data below.
- DO NOT make claims about products that the available data does not support.

SHOP INFORMATION:
- Name: {store_name}
- Type: Electronics and accessories shop
- Application features: admin dashboard, product management, login

HOW TO RESPOND:
1. Always check whether the question is about the electronics shop.
2. If the question is off-topic, politely decline and steer back to the shop.
3. Use the latest product data to give accurate answers.
4. Respond politely and informatively, focused on the user's needs.
5. When possible, offer several options or recommendations based on the context.""",
        description="Fixed policy restricting the assistant to the shop domain"
    )

    # Full chat prompt - policy, data and question
    CHAT_PROMPT = PromptTemplate(
        template="""{policy}

CURRENT DATA:
{data}

User question: {message}""",
        description="Template for a single-turn shop chat"
    )


class PromptBuilder:
    """Builder for the chat prompt from a catalog snapshot"""

    def __init__(
        self,
        store_name: str = settings.STORE_NAME,
        sample_size: int = settings.PROMPT_SAMPLE_SIZE,
        currency: str = settings.CURRENCY_PREFIX,
        thousands_separator: str = settings.THOUSANDS_SEPARATOR,
    ):
        self.store_name = store_name
        self.sample_size = min(sample_size, MAX_SAMPLE_PRODUCTS)
        self.currency = currency
        self.thousands_separator = thousands_separator

    def _price(self, value: float) -> str:
        return f"{self.currency}{format_number(value, self.thousands_separator)}"

    def build_policy(self) -> str:
        """Render the fixed policy block"""
        return PromptTemplates.POLICY_PROMPT.format(store_name=self.store_name)

    def format_catalog_summary(self, snapshot: CatalogSnapshot) -> str:
        """
        Render a snapshot as the human-readable data section of the prompt.

        Args:
            snapshot: Catalog snapshot for this request

        Returns:
            Summary with counts, price range, per-category counts and a
            bounded sample of products
        """
        lines: List[str] = [
            f"Total products: {snapshot.total_products}",
            f"Total categories: {snapshot.categories_count}",
            f"Price range: {self._price(snapshot.min_price)} - {self._price(snapshot.max_price)}",
            "",
            "Product categories and counts:",
        ]
        for category in snapshot.categories:
            lines.append(f"- {category}: {snapshot.category_counts.get(category, 0)} products")
        lines.append("")

        sample = snapshot.products[:self.sample_size]
        lines.append("Sample products:")
        for product in sample:
            lines.append(
                f"- {product.name} (Category: {product.category}, Price: {self._price(product.price)})"
            )

        if len(sample) < snapshot.total_products:
            lines.append("")
            lines.append(
                f"(The list above shows only {len(sample)} of {snapshot.total_products} products)"
            )

        return "\n".join(lines)

    def build_chat_prompt(self, snapshot: CatalogSnapshot, message: str) -> str:
        """
        Build the complete prompt for one chat turn.

        Args:
            snapshot: Catalog snapshot for this request
            message: User message, used as-is

        Returns:
            Prompt ready for the generation backend
        """
        prompt = PromptTemplates.CHAT_PROMPT.format(
            policy=self.build_policy(),
            data=self.format_catalog_summary(snapshot),
            message=message,
        )
        logger.debug(f"Built chat prompt ({len(prompt)} chars, {len(snapshot.products)} products)")
        return prompt
