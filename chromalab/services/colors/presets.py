"""
ChromaLab Reference Color Data

Static lookup data consumed by the engine: the CSS named-color dictionary
used for nearest-name matching, named gradient-map presets, and well-known
brand palettes for the brand analyzer.
"""

from typing import Dict, List, Tuple


# CSS Color Module Level 4 named colors (lowercase hex)
CSS_COLORS: Dict[str, str] = {
    "aliceblue": "#f0f8ff",
    "antiquewhite": "#faebd7",
    "aqua": "#00ffff",
    "aquamarine": "#7fffd4",
    "azure": "#f0ffff",
    "beige": "#f5f5dc",
    "bisque": "#ffe4c4",
    "black": "#000000",
    "blanchedalmond": "#ffebcd",
    "blue": "#0000ff",
    "blueviolet": "#8a2be2",
    "brown": "#a52a2a",
    "burlywood": "#deb887",
    "cadetblue": "#5f9ea0",
    "chartreuse": "#7fff00",
    "chocolate": "#d2691e",
    "coral": "#ff7f50",
    "cornflowerblue": "#6495ed",
    "cornsilk": "#fff8dc",
    "crimson": "#dc143c",
    "cyan": "#00ffff",
    "darkblue": "#00008b",
    "darkcyan": "#008b8b",
    "darkgoldenrod": "#b8860b",
    "darkgray": "#a9a9a9",
    "darkgreen": "#006400",
    "darkkhaki": "#bdb76b",
    "darkmagenta": "#8b008b",
    "darkolivegreen": "#556b2f",
    "darkorange": "#ff8c00",
    "darkorchid": "#9932cc",
    "darkred": "#8b0000",
    "darksalmon": "#e9967a",
    "darkseagreen": "#8fbc8f",
    "darkslateblue": "#483d8b",
    "darkslategray": "#2f4f4f",
    "darkturquoise": "#00ced1",
    "darkviolet": "#9400d3",
    "deeppink": "#ff1493",
    "deepskyblue": "#00bfff",
    "dimgray": "#696969",
    "dodgerblue": "#1e90ff",
    "firebrick": "#b22222",
    "floralwhite": "#fffaf0",
    "forestgreen": "#228b22",
    "fuchsia": "#ff00ff",
    "gainsboro": "#dcdcdc",
    "ghostwhite": "#f8f8ff",
    "gold": "#ffd700",
    "goldenrod": "#daa520",
    "gray": "#808080",
    "green": "#008000",
    "greenyellow": "#adff2f",
    "honeydew": "#f0fff0",
    "hotpink": "#ff69b4",
    "indianred": "#cd5c5c",
    "indigo": "#4b0082",
    "ivory": "#fffff0",
    "khaki": "#f0e68c",
    "lavender": "#e6e6fa",
    "lavenderblush": "#fff0f5",
    "lawngreen": "#7cfc00",
    "lemonchiffon": "#fffacd",
    "lightblue": "#add8e6",
    "lightcoral": "#f08080",
    "lightcyan": "#e0ffff",
    "lightgoldenrodyellow": "#fafad2",
    "lightgray": "#d3d3d3",
    "lightgreen": "#90ee90",
    "lightpink": "#ffb6c1",
    "lightsalmon": "#ffa07a",
    "lightseagreen": "#20b2aa",
    "lightskyblue": "#87cefa",
    "lightslategray": "#778899",
    "lightsteelblue": "#b0c4de",
    "lightyellow": "#ffffe0",
    "lime": "#00ff00",
    "limegreen": "#32cd32",
    "linen": "#faf0e6",
    "magenta": "#ff00ff",
    "maroon": "#800000",
    "mediumaquamarine": "#66cdaa",
    "mediumblue": "#0000cd",
    "mediumorchid": "#ba55d3",
    "mediumpurple": "#9370db",
    "mediumseagreen": "#3cb371",
    "mediumslateblue": "#7b68ee",
    "mediumspringgreen": "#00fa9a",
    "mediumturquoise": "#48d1cc",
    "mediumvioletred": "#c71585",
    "midnightblue": "#191970",
    "mintcream": "#f5fffa",
    "mistyrose": "#ffe4e1",
    "moccasin": "#ffe4b5",
    "navajowhite": "#ffdead",
    "navy": "#000080",
    "oldlace": "#fdf5e6",
    "olive": "#808000",
    "olivedrab": "#6b8e23",
    "orange": "#ffa500",
    "orangered": "#ff4500",
    "orchid": "#da70d6",
    "palegoldenrod": "#eee8aa",
    "palegreen": "#98fb98",
    "paleturquoise": "#afeeee",
    "palevioletred": "#db7093",
    "papayawhip": "#ffefd5",
    "peachpuff": "#ffdab9",
    "peru": "#cd853f",
    "pink": "#ffc0cb",
    "plum": "#dda0dd",
    "powderblue": "#b0e0e6",
    "purple": "#800080",
    "rebeccapurple": "#663399",
    "red": "#ff0000",
    "rosybrown": "#bc8f8f",
    "royalblue": "#4169e1",
    "saddlebrown": "#8b4513",
    "salmon": "#fa8072",
    "sandybrown": "#f4a460",
    "seagreen": "#2e8b57",
    "seashell": "#fff5ee",
    "sienna": "#a0522d",
    "silver": "#c0c0c0",
    "skyblue": "#87ceeb",
    "slateblue": "#6a5acd",
    "slategray": "#708090",
    "snow": "#fffafa",
    "springgreen": "#00ff7f",
    "steelblue": "#4682b4",
    "tan": "#d2b48c",
    "teal": "#008080",
    "thistle": "#d8bfd8",
    "tomato": "#ff6347",
    "turquoise": "#40e0d0",
    "violet": "#ee82ee",
    "wheat": "#f5deb3",
    "white": "#ffffff",
    "whitesmoke": "#f5f5f5",
    "yellow": "#ffff00",
    "yellowgreen": "#9acd32",
}


# name -> (description, [(position, hex), ...])
GRADIENT_PRESETS: Dict[str, Tuple[str, List[Tuple[float, str]]]] = {
    "Duotone": ("Classic two-color duotone", [(0.0, "#000000"), (1.0, "#ffffff")]),
    "Cinematic": ("Cinematic blue-orange look", [(0.0, "#1a1a2e"), (0.5, "#16213e"), (1.0, "#e94560")]),
    "Warm": ("Warm tones", [(0.0, "#2c1810"), (1.0, "#f4a460")]),
    "Cold": ("Cold blue tones", [(0.0, "#0a1929"), (1.0, "#64b5f6")]),
    "Gold / Blue": ("Gold highlights, blue shadows", [(0.0, "#1e3a5f"), (0.5, "#2d5f8f"), (1.0, "#ffd700")]),
    "Cyber Neon": (
        "Neon cyberpunk style",
        [(0.0, "#0d0d0d"), (0.3, "#1a0033"), (0.7, "#330066"), (1.0, "#00ffff")],
    ),
    "Pastel": ("Soft pastel colors", [(0.0, "#e8d5c4"), (1.0, "#f5c2e0")]),
    "Black & White": ("Classic black and white", [(0.0, "#000000"), (1.0, "#ffffff")]),
    "Retro Film": (
        "Vintage film look",
        [(0.0, "#2d1b0e"), (0.3, "#5d4e37"), (0.7, "#8b7355"), (1.0, "#d4c5a9")],
    ),
}


# name -> (description, [hex, ...])
BRAND_PALETTES: Dict[str, Tuple[str, List[str]]] = {
    "Coca-Cola": ("Classic red and white", ["#f40009", "#ffffff", "#000000"]),
    "IKEA": ("Blue and yellow", ["#ffcc00", "#003399", "#ffffff"]),
    "Spotify": ("Green and black", ["#1db954", "#191414", "#ffffff"]),
    "McDonald's": ("Golden arches", ["#ffc72c", "#da020e", "#ffffff"]),
    "Nike": ("Black and white", ["#000000", "#ffffff", "#c4c4c4"]),
    "Starbucks": ("Green and white", ["#00704a", "#ffffff", "#000000"]),
    "Facebook": ("Blue social", ["#1877f2", "#ffffff", "#42a5f5"]),
    "Instagram": ("Gradient rainbow", ["#e4405f", "#fcaf45", "#833ab4", "#5851db", "#405de6"]),
    "YouTube": ("Red and black", ["#ff0000", "#000000", "#ffffff"]),
    "Amazon": ("Orange smile", ["#ff9900", "#000000", "#ffffff"]),
    "Google": ("Primary colors", ["#4285f4", "#ea4335", "#fbbc05", "#34a853"]),
    "Microsoft": ("Four squares", ["#f25022", "#7fba00", "#00a4ef", "#ffb900"]),
    "Netflix": ("Red and black", ["#e50914", "#000000", "#ffffff"]),
    "Airbnb": ("Rausch and babu", ["#ff5a5f", "#00a699", "#fc642d", "#484848"]),
    "LinkedIn": ("Professional blue", ["#0077b5", "#000000", "#ffffff"]),
    "TikTok": ("Black and gradient", ["#000000", "#ffffff", "#ff0050", "#00f2ea"]),
    "PayPal": ("Blue payment", ["#003087", "#009cde", "#012169"]),
    "Visa": ("Blue and gold", ["#1a1f71", "#f7b600"]),
    "Mastercard": ("Red and orange", ["#eb001b", "#f79e1b"]),
    "FedEx": ("Purple and orange", ["#4d148c", "#ff6600", "#ffffff"]),
}
