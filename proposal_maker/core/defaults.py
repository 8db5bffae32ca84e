"""Default prompt templates and styling used for initial setup.

``DEFAULT_DECK_TEMPLATE`` is used when a text-to-deck request names no
template. ``DEFAULT_PROMPT_TEMPLATES`` is seeded into the prompt template
library (see ``core.init_default_prompts``).
"""

TEXT_PLACEHOLDER = "{text}"

_DECK_JSON_STRUCTURE = """{
  "presentationTitle": "%s",
  "totalSlides": number,
  "slides": [
    {
      "id": "unique-id",
      "title": "Slide title",
      "content": "Main content text",
      "type": "title|content|bullet|image|mixed",
      "bullets": ["bullet point 1", "bullet point 2"] // only if type is bullet or mixed
      "imagePlaceholder": "Description of image to be added" // only if type is image or mixed
    }
  ]
}"""

_DECK_FOOTER = """Text to analyze:
{text}

Return only valid JSON, no additional text or explanations."""


DEFAULT_DECK_TEMPLATE = """Analyze the following text and convert it into a structured JSON format suitable for creating a PowerPoint presentation. 

The JSON should have this exact structure:
""" + _DECK_JSON_STRUCTURE % "A descriptive title for the presentation" + """

Guidelines:
- Create logical slide breaks based on topics, sections, or natural content flow
- Use 'title' type for slide titles and introductions
- Use 'content' type for text-heavy slides with paragraphs
- Use 'bullet' type for slides with bullet points
- Use 'image' type when visual content would enhance the slide
- Use 'mixed' type for slides with both text and visual elements
- Include image placeholders when visual content would be beneficial
- Ensure each slide has a clear, descriptive title
- Make content concise but informative
- Structure content logically for presentation flow

""" + _DECK_FOOTER


BUSINESS_DECK_TEMPLATE = """Convert the following text into a business presentation JSON structure with executive summary and key insights.

The JSON should have this exact structure:
""" + _DECK_JSON_STRUCTURE % "Business-focused title" + """

Guidelines:
- Start with an executive summary slide
- Include key metrics and data points
- Use bullet points for easy scanning
- Include action items and next steps
- Add visual placeholders for charts and graphs
- Focus on business impact and ROI
- Keep slides concise and professional
- Structure for executive audience

""" + _DECK_FOOTER


EDUCATIONAL_DECK_TEMPLATE = """Convert the following text into an educational presentation JSON structure with learning objectives and interactive elements.

The JSON should have this exact structure:
""" + _DECK_JSON_STRUCTURE % "Educational title" + """

Guidelines:
- Start with learning objectives
- Include concept explanations with examples
- Add interactive elements and questions
- Use visual aids for complex concepts
- Include summary and review slides
- Structure for student engagement
- Add practice exercises where appropriate
- Include assessment questions

""" + _DECK_FOOTER


DESIGN_SYSTEM_ANALYZER = """Analyze this UI screenshot and extract design tokens into CSS variables. 

Return a JSON object with the following structure:
{
  "cssVariables": ":root { /* CSS variables here */ }",
  "analysisResult": "Detailed analysis of the design system"
}

Guidelines for CSS variables:
- Extract primary, secondary, and accent colors
- Identify typography scales (font sizes, line heights, font weights)
- Extract spacing values (padding, margins, gaps)
- Identify border radius values
- Extract shadow values
- Use semantic naming (e.g., --primary-color, --text-lg, --spacing-md)
- Include both light and dark theme variables if applicable
- Use standard CSS units (rem, px, em)

Analysis should include:
- Color palette analysis
- Typography system
- Spacing system
- Component patterns
- Design principles observed

Return only valid JSON, no additional text."""


BRAND_DESIGN_EXTRACTOR = """Analyze this brand design screenshot and extract brand-specific design tokens.

Return a JSON object with the following structure:
{
  "cssVariables": ":root { /* Brand CSS variables */ }",
  "analysisResult": "Brand design analysis"
}

Focus on:
- Brand colors (primary, secondary, accent)
- Logo colors and variations
- Typography hierarchy
- Brand-specific spacing
- Icon styles and colors
- Brand personality indicators

Use brand-specific naming (e.g., --brand-primary, --logo-color)

Return only valid JSON, no additional text."""


COMPONENT_LIBRARY_ANALYZER = """Analyze this component library screenshot and extract reusable design tokens.

Return a JSON object with the following structure:
{
  "cssVariables": ":root { /* Component CSS variables */ }",
  "analysisResult": "Component library analysis"
}

Focus on:
- Button styles and variants
- Form element styles
- Card and container styles
- Navigation components
- Interactive states (hover, focus, active)
- Component spacing and sizing
- Icon integration patterns

Use component-specific naming (e.g., --btn-primary, --card-shadow)

Return only valid JSON, no additional text."""


DEFAULT_PROMPT_TEMPLATES = [
    {
        "name": "PowerPoint Presentation Generator",
        "description": "Default prompt for converting text into structured PowerPoint JSON",
        "category": "presentation",
        "prompt": DEFAULT_DECK_TEMPLATE,
    },
    {
        "name": "Business Presentation Generator",
        "description": "Specialized prompt for business presentations with executive summary",
        "category": "presentation",
        "prompt": BUSINESS_DECK_TEMPLATE,
    },
    {
        "name": "Educational Presentation Generator",
        "description": "Specialized prompt for educational content with learning objectives",
        "category": "presentation",
        "prompt": EDUCATIONAL_DECK_TEMPLATE,
    },
    {
        "name": "Design System Analyzer",
        "description": "Analyzes UI screenshots and extracts design tokens into CSS variables",
        "category": "design",
        "prompt": DESIGN_SYSTEM_ANALYZER,
    },
    {
        "name": "Brand Design Extractor",
        "description": "Extracts brand colors and design elements from brand materials",
        "category": "design",
        "prompt": BRAND_DESIGN_EXTRACTOR,
    },
    {
        "name": "Component Library Analyzer",
        "description": "Analyzes component libraries and design systems",
        "category": "design",
        "prompt": COMPONENT_LIBRARY_ANALYZER,
    },
]


# Fallback design tokens when a design library has no CSS
DEFAULT_CSS_VARIABLES = """:root {
      --primary: #3b82f6;
      --secondary: #64748b;
      --text: #1f2937;
      --background: #ffffff;
      --space-sm: 0.5rem;
      --space-md: 1rem;
      --space-lg: 2rem;
      --space-xl: 3rem;
      --font-sm: 0.875rem;
      --font-md: 1rem;
      --font-lg: 1.25rem;
      --font-xl: 1.5rem;
      --font-2xl: 2rem;
      --font-3xl: 2.5rem;
    }"""


IMPROVEMENT_SYSTEM_PROMPT = """# HTML Presentation Improvement Expert

You are an expert web developer and presentation designer specializing in targeted HTML improvements. Your goal is to make ONLY the specific changes requested by the user while preserving all existing functionality, content, and design elements.

## Core Principles

### Targeted Improvements
- **Preserve Everything**: Keep all existing content, functionality, and design elements
- **Make Only Requested Changes**: Apply ONLY the specific improvements mentioned in the user's prompt
- **Maintain Quality**: Ensure all changes maintain professional standards
- **Incremental Enhancement**: Build upon existing work, don't replace it

### Change Detection & Preservation
- **Content Preservation**: Keep all text, images, and media exactly as they are
- **Functionality Maintenance**: Preserve all JavaScript functionality and interactions
- **Design Consistency**: Maintain the existing design system and visual hierarchy
- **Structure Integrity**: Keep the HTML structure and CSS organization intact

## Technical Requirements

### HTML Preservation
- **Structure Integrity**: Maintain all HTML tags and nesting
- **Content Accuracy**: Preserve all text content exactly
- **Attribute Preservation**: Keep all existing attributes and values
- **Semantic Structure**: Maintain accessibility and semantic meaning

### CSS Enhancement
- **Selective Updates**: Modify only CSS properties mentioned in the prompt
- **Property Preservation**: Keep all existing CSS properties unless changed
- **Media Query Integrity**: Maintain responsive breakpoints
- **Custom Properties**: Preserve existing CSS variables

### JavaScript Maintenance
- **Functionality Preservation**: Keep all existing JavaScript functionality
- **Event Handler Integrity**: Maintain all event listeners and handlers
- **Navigation Systems**: Preserve slide navigation and controls
- **Interactive Elements**: Keep all interactive features working

## Output Requirements

Generate ONLY the improved HTML file that:
1. **Preserves ALL existing content and functionality**
2. **Makes ONLY the specific changes requested**
3. **Maintains professional quality and performance**
4. **Ensures accessibility compliance**
5. **Works immediately when saved as .html file**

The improved HTML should be an enhanced version of the original, not a replacement."""


IMPROVEMENT_USER_TEMPLATE = """Make targeted improvements to the following HTML presentation based on this specific request:

IMPROVEMENT REQUEST:
{improvement}

ORIGINAL HTML:
{html}

CRITICAL REQUIREMENTS:
1. Preserve ALL existing content, functionality, and design elements
2. Make ONLY the specific changes requested in the improvement prompt
3. Do not remove or replace any existing features
4. Maintain all existing CSS, JavaScript, and HTML structure
5. Apply changes incrementally to build upon the existing work
6. Ensure the result works immediately when saved as .html file

Generate ONLY the improved HTML file with embedded CSS and JavaScript. The result must preserve everything while making only the requested improvements."""


ONE_SHOT_SYSTEM_PROMPT = """You are an expert presentation designer and front-end developer. You respond only with a complete, valid HTML document. Never include markdown code fences or additional commentary - just the raw HTML.

Requirements:
- One self-contained HTML file with embedded CSS (and JavaScript only if needed for navigation)
- Each slide is a <div class="slide"> element, in presentation order
- Begin with a title slide; keep each slide focused on one idea
- Use the design tokens provided as CSS custom properties on :root and reference them with var()
- Responsive layout and a print stylesheet that keeps each slide on its own page"""


ONE_SHOT_USER_TEMPLATE = """Create a complete HTML slide presentation from the following content.

DESIGN TOKENS:
{css}

CONTENT:
{text}"""
