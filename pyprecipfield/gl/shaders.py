"""
GLSL program of the precipitation layer (GLSL 330 core).

The fragment shader is the GPU form of the frame evaluator: it mirrors
``render.evaluator`` line for line, with uniform arrays of fixed capacity
``MAX_POINTS`` and ``MAX_GRADIENT_STOPS``.

Author: B.G.
"""

from .. import constants as cte

VERTEX_SHADER = """
#version 330

in vec2 a_position;
out vec2 v_screenPos;

void main() {
    v_screenPos = a_position;
    gl_Position = vec4(a_position, 0.0, 1.0);
}
"""

FRAGMENT_SHADER_TEMPLATE = """
#version 330

#define MAX_POINTS {max_points}
#define MAX_STOPS {max_stops}

in vec2 v_screenPos;
out vec4 f_color;

// Map transform
uniform vec2 u_center;        // [lng, lat]
uniform float u_zoom;
uniform vec2 u_viewportSize;  // [width, height] in pixels

// Radial blob model
uniform float u_influenceRadius;
uniform float u_falloffSteepness;

uniform vec3 u_points[MAX_POINTS];  // [lng, lat, value]
uniform int u_numPoints;

uniform vec3 u_gradientColors[MAX_STOPS];
uniform float u_gradientStops[MAX_STOPS];
uniform int u_numStops;

const float EARTH_RADIUS = {earth_radius};
const float WORLD_SIZE = {world_size};
const float BOOST = {boost};
const float ALPHA = {alpha};
const float PI = 3.14159265359;

float degToRad(float deg) {{
    return deg * PI / 180.0;
}}

float lngToMercatorX(float lng) {{
    return (lng + 180.0) / 360.0;
}}

float latToMercatorY(float lat) {{
    float latRad = degToRad(lat);
    return (PI - log(tan(PI / 4.0 + latRad / 2.0))) / (2.0 * PI);
}}

float mercatorYToLat(float y) {{
    float latRad = 2.0 * (atan(exp(PI * (1.0 - 2.0 * y))) - PI / 4.0);
    return latRad * 180.0 / PI;
}}

float mercatorXToLng(float x) {{
    return x * 360.0 - 180.0;
}}

float lngDifference(float lng1, float lng2) {{
    float diff = lng2 - lng1;
    if (diff > 180.0) diff -= 360.0;
    if (diff <= -180.0) diff += 360.0;
    return diff;
}}

vec2 screenToGeo(vec2 screenPos, out float worldWrap) {{
    float centerMercX = lngToMercatorX(u_center.x);
    float centerMercY = latToMercatorY(u_center.y);
    float scale = WORLD_SIZE * pow(2.0, u_zoom);

    // NDC +y is up, mercator +y is south
    vec2 pixelPos = vec2(screenPos.x, -screenPos.y) * u_viewportSize * 0.5;
    vec2 mercOffset = pixelPos / scale;

    float mercX = centerMercX + mercOffset.x;
    float mercY = centerMercY + mercOffset.y;

    worldWrap = floor(mercX);
    return vec2(mercatorXToLng(mercX - worldWrap), mercatorYToLat(mercY));
}}

float haversineDistance(vec2 p1, vec2 p2) {{
    float lat1 = degToRad(p1.y);
    float lat2 = degToRad(p2.y);
    float dLat = degToRad(p2.y - p1.y);
    float dLng = degToRad(lngDifference(p1.x, p2.x));

    float a = sin(dLat / 2.0) * sin(dLat / 2.0) +
              cos(lat1) * cos(lat2) * sin(dLng / 2.0) * sin(dLng / 2.0);
    float c = 2.0 * atan(sqrt(a), sqrt(max(1.0 - a, 0.0)));
    return EARTH_RADIUS * c;
}}

vec3 getColor(float value) {{
    value = clamp(value, 0.0, 1.0);
    vec3 color = u_gradientColors[0];
    for (int k = 0; k < MAX_STOPS; k++) {{
        if (k >= u_numStops) break;
        if (u_gradientStops[k] <= value) color = u_gradientColors[k];
    }}
    return color;
}}

void main() {{
    float worldWrap;
    vec2 currentPos = screenToGeo(v_screenPos, worldWrap);

    if (worldWrap != 0.0) {{
        f_color = vec4(0.0);
        return;
    }}

    float totalInfluence = 0.0;
    float totalWeight = 0.0;

    for (int i = 0; i < MAX_POINTS; i++) {{
        if (i >= u_numPoints) break;

        float pointValue = u_points[i].z;
        if (pointValue <= 0.0) continue;

        float distance = haversineDistance(currentPos, u_points[i].xy);
        if (distance < u_influenceRadius) {{
            float nd = pow(distance / u_influenceRadius, u_falloffSteepness);
            float falloff = 0.5 + 0.5 * cos(nd * PI);
            float weight = falloff * falloff;
            totalInfluence += pointValue * falloff * weight;
            totalWeight += weight;
        }}
    }}

    float rawValue = totalWeight > 0.0 ? (totalInfluence / totalWeight) * BOOST : 0.0;
    if (rawValue <= 0.0) {{
        f_color = vec4(0.0);
        return;
    }}

    f_color = vec4(getColor(rawValue) / 255.0, ALPHA);
}}
"""


def fragment_shader_source() -> str:
    """Fragment shader with the package constants substituted."""
    return FRAGMENT_SHADER_TEMPLATE.format(
        max_points=cte.MAX_POINTS,
        max_stops=cte.MAX_GRADIENT_STOPS,
        earth_radius=repr(float(cte.EARTH_RADIUS)),
        world_size=repr(float(cte.WORLD_SIZE)),
        boost=repr(float(cte.INTENSITY_BOOST)),
        alpha=repr(float(cte.FIXED_ALPHA)),
    )
