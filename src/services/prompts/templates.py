"""
Static prompt template catalog

Templates are flat text with {named} placeholders. Marketplace-specific
phrasing is written into the text itself; nothing is computed at render time.
"""

from types import MappingProxyType

from .models import PromptTemplate


LISTING_SYSTEM = PromptTemplate(
    name="listing_system",
    version="1.0",
    text="""You are an expert e-commerce product content creator for {marketplace_name}, with deep understanding of:
1. {marketplace_name}'s search algorithm and ranking factors
2. Buyer psychology and purchase decision factors
3. Product presentation best practices
4. SEO and keyword optimization for e-commerce

Your task is to enhance product listings to maximize visibility, conversion rate, and customer satisfaction.""",
)

LISTING = PromptTemplate(
    name="listing",
    version="1.0",
    text="""Please enhance the following product for {marketplace_name}:
{product_details}

For each field, provide significant improvements while maintaining accuracy:
1. TITLE: Create a keyword-rich, compelling title (stay under {character_limit} characters)
2. DESCRIPTION: Write a persuasive, well-structured description with key features and benefits
3. BULLET_POINTS: Create 5 concise, benefit-focused bullet points
4. SEARCH_TERMS: Generate 5-7 high-value search keywords

Return the enhanced product data in this JSON format:
{
  "title": "Enhanced product title",
  "description": "Enhanced product description...",
  "bullet_points": [
    "First bullet point",
    "Second bullet point",
    "Third bullet point",
    "Fourth bullet point",
    "Fifth bullet point"
  ],
  "search_terms": ["keyword 1", "keyword 2", "keyword 3", "keyword 4", "keyword 5"]
}""",
)

PRODUCT_TYPE = PromptTemplate(
    name="product_type",
    version="1.0",
    text="""As an expert retail product analyst, analyze this product data:
{sample_data}

Identify the specific product type, category, and any relevant attributes. Focus on what the product actually is, not just broad categories.

Return your analysis in this JSON format:
{
  "product_type": "specific product type (e.g., 'bluetooth headphones' not just 'electronics')",
  "category": "primary marketplace category",
  "subcategory": "appropriate subcategory",
  "target_audience": "likely target customer",
  "price_tier": "budget/mid-range/premium/luxury",
  "key_features": ["list", "of", "notable", "features"],
  "confidence_score": 0.0
}

If you are uncertain, reflect it in confidence_score (0.0 to 1.0).""",
)

TITLE = PromptTemplate(
    name="title",
    version="1.0",
    text="""As an SEO specialist for {marketplace_name}, create 1-3 optimized product titles for this {product_type}.

Product Details:
{product_details}

Your titles should:
1. Stay within {marketplace_name}'s limit of {character_limit} characters
2. Place the most important keywords at the beginning
3. Include the brand name, key product type, and 2-3 distinguishing features
4. Be easy to read and not keyword-stuffed
5. Match how real customers search for this type of product

For Amazon: Format like "Brand + Model + Product Type + Key Features"
For eBay: Include brand, model, size and color; be specific and descriptive
For Walmart: Be direct and practical; brand, product type, key features
For Etsy: Format like "Descriptive Adjective + Product Type + Unique Selling Point"
For Shopify: Format like "Key Feature + Product Type + Brand"

Do NOT use ALL CAPS (except acronyms like "USB"), promotional phrases like "Sale" or "Free Shipping", or repeated keywords.

Return JSON format:
{
  "titles": ["Title Option 1", "Title Option 2", "Title Option 3"],
  "reasoning": "Brief explanation of keyword strategy used"
}""",
)

DESCRIPTION = PromptTemplate(
    name="description",
    version="1.0",
    text="""Create a compelling product description for this {product_type}.

Product Details:
{product_details}

Your description should:
1. Lead with a strong value proposition or key benefit
2. Use natural, conversational language
3. Include specific, factual details about features and benefits
4. Target a {target_audience} audience in a {price_tier} market segment
5. Be 150-200 words in short, scannable paragraphs
6. Avoid vague claims, unsupported superlatives, and marketing cliches

Do NOT mention pricing or shipping, use placeholders, or invent specifications that are not in the product details.

Return ONLY the description text with no additional commentary.""",
)

BULLETS = PromptTemplate(
    name="bullets",
    version="1.0",
    text="""As a product marketer for {marketplace_name}, create 5 persuasive bullet points highlighting the key features and benefits of this {product_type}.

Product Details:
{product_details}

For each bullet point:
1. Lead with a clear, specific benefit to the customer
2. Follow with the feature that delivers that benefit
3. Include measurements, materials, or specifications when relevant
4. Keep it under 200 characters

For Amazon: Start each with a capitalized phrase highlighting a benefit
For eBay: Be concise and factual, ideally under 80 characters
For Walmart: Focus on practical benefits and value
For Etsy: Emphasize unique, handmade, or customizable aspects
For Shopify: Use a conversational tone focusing on lifestyle benefits

Format as JSON:
{
  "bullet_points": [
    "First bullet point about primary benefit...",
    "Second bullet point about another key feature...",
    "Third bullet point focusing on quality/durability...",
    "Fourth bullet point addressing a common customer concern...",
    "Fifth bullet point with a unique selling proposition..."
  ]
}""",
)

KEYWORDS = PromptTemplate(
    name="keywords",
    version="1.0",
    text="""As an e-commerce SEO expert for {marketplace_name}, analyze this product and generate optimal search keywords.

Product Details:
{product_details}

Generate three tiers of keywords:
1. Primary (3-5): High-volume keywords that directly match this product
2. Secondary (5-8): Related terms, features, use cases, and variations
3. Long-tail (5-8): Specific phrases with buyer intent and less competition

Do NOT include irrelevant high-volume terms, near-duplicates with different word order, or competitor brand names.

Return in JSON format:
{
  "primary_keywords": ["keyword1", "keyword2", "keyword3"],
  "secondary_keywords": ["keyword4", "keyword5", "keyword6"],
  "long_tail_keywords": ["specific phrase 1", "specific phrase 2"]
}""",
)

CATEGORY = PromptTemplate(
    name="category",
    version="1.0",
    text="""As a marketplace category specialist, determine the optimal category path for this product on {marketplace_name}.

Product Details:
{product_details}

1. Identify the most specific category where this product belongs
2. Provide the complete path from top-level category to the most specific subcategory
3. Suggest 1-2 alternative paths if appropriate

For Amazon: Use browse node names and their hierarchy
For Shopify: Suggest a primary category and any relevant collections
For Etsy: Follow the Etsy category system

Return as JSON:
{
  "primary_category_path": ["Level 1", "Level 2", "Level 3"],
  "category_id": "specific ID if known",
  "alternative_paths": [["Alt Level 1", "Alt Level 2"]],
  "reasoning": "Brief explanation for category selection"
}""",
)

BRAND = PromptTemplate(
    name="brand",
    version="1.0",
    text="""As a branding expert for {product_type} products, suggest 3-5 appropriate brand names for this product.

Product Details:
{product_details}

The brand names should sound like real, established brands in this category, avoid similarity to well-known trademarks, and be easy to pronounce.

For each suggestion give the name, a brief rationale, and a confidence score from 1 to 10.

Return in JSON format:
{
  "brand_suggestions": [
    {"name": "Brand Name 1", "rationale": "Brief explanation", "confidence": 8}
  ],
  "recommended_brand": "Most appropriate name from the list"
}""",
)

FIELD_MAPPING = PromptTemplate(
    name="field_mapping",
    version="1.0",
    text="""As a data analyst specializing in e-commerce product data, analyze these CSV column headers and sample values to determine their proper field mappings.

CSV Headers and Sample Values:
{headers_and_samples}

For each column determine:
1. Which standard product data field it most likely represents
2. How confident you are in this mapping (0.0 to 1.0)
3. Any special processing or normalization needed

Map to these standard fields whenever possible:
- product_id: A unique identifier for the product
- title: The product's main title/name
- description: Detailed product description
- price: The product's price (numeric value)
- brand: The manufacturer or brand name
- category: Product category or department
- bullet_points: Key features or selling points
- images: Image URLs or identifiers
- asin: Amazon Standard Identification Number
- sku: Stock Keeping Unit
- upc: Universal Product Code
- dimensions: Product size/measurements
- weight: Product weight
- color: Color option
- size: Size option
Use "unmapped" when no standard field fits.

Return a JSON object with mappings:
{
  "column_mappings": [
    {
      "original_column": "CSV column name",
      "standard_field": "One of the standard fields listed above",
      "confidence": 0.0,
      "notes": "Any special considerations"
    }
  ]
}""",
)

SYSTEM_PRODUCT_TYPE = PromptTemplate(
    name="system_product_type",
    version="1.0",
    text="You are an expert retail product analyst specialized in identifying specific product types and categories from limited data.",
)

SYSTEM_TITLE = PromptTemplate(
    name="system_title",
    version="1.0",
    text="You are an SEO specialist for {marketplace_name} with expertise in creating high-converting product titles.",
)

SYSTEM_DESCRIPTION = PromptTemplate(
    name="system_description",
    version="1.0",
    text="You are an experienced e-commerce copywriter who specializes in writing product descriptions that convert.",
)

SYSTEM_BULLETS = PromptTemplate(
    name="system_bullets",
    version="1.0",
    text="You are a product marketer for {marketplace_name} with expertise in creating persuasive bullet points.",
)

SYSTEM_KEYWORDS = PromptTemplate(
    name="system_keywords",
    version="1.0",
    text="You are an e-commerce SEO expert who identifies search keywords that match real customer search behavior on {marketplace_name}.",
)

SYSTEM_CATEGORY = PromptTemplate(
    name="system_category",
    version="1.0",
    text="You are a marketplace category specialist who knows the category taxonomy of {marketplace_name}.",
)

SYSTEM_BRAND = PromptTemplate(
    name="system_brand",
    version="1.0",
    text="You are a branding expert specializing in creating authentic brand names for e-commerce products.",
)

SYSTEM_FIELD_MAPPING = PromptTemplate(
    name="system_field_mapping",
    version="1.0",
    text="""You are a data analysis expert specializing in e-commerce product data.
You identify the meaning of CSV columns and map ambiguous columns to standard product attributes.
Respond with ONLY a valid JSON object.""",
)


# Process-wide, read-only catalog
TEMPLATE_CATALOG = MappingProxyType(
    {
        template.name: template
        for template in (
            LISTING_SYSTEM,
            LISTING,
            PRODUCT_TYPE,
            TITLE,
            DESCRIPTION,
            BULLETS,
            KEYWORDS,
            CATEGORY,
            BRAND,
            FIELD_MAPPING,
            SYSTEM_PRODUCT_TYPE,
            SYSTEM_TITLE,
            SYSTEM_DESCRIPTION,
            SYSTEM_BULLETS,
            SYSTEM_KEYWORDS,
            SYSTEM_CATEGORY,
            SYSTEM_BRAND,
            SYSTEM_FIELD_MAPPING,
        )
    }
)
