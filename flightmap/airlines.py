"""
Airline reference data for display and filtering.

Maps 3-letter ICAO airline designators (the callsign prefix) to
display names.
"""

from typing import Dict, Optional

AIRLINES: Dict[str, str] = {
    'CCA': 'Air China',
    'CSN': 'China Southern Airlines',
    'CES': 'China Eastern Airlines',
    'CHH': 'Hainan Airlines',
    'CSC': 'Sichuan Airlines',
    'CXA': 'Xiamen Airlines',
    'CDC': 'Chengdu Airlines',
    'CBJ': 'Capital Airlines',
    'CYZ': 'China Postal Airlines',
    'SZX': 'Shenzhen Airlines',
    'AFL': 'Aeroflot',
    'AFR': 'Air France',
    'AAL': 'American Airlines',
    'ANA': 'All Nippon Airways',
    'BAW': 'British Airways',
    'CPA': 'Cathay Pacific',
    'DAL': 'Delta Air Lines',
    'DLH': 'Lufthansa',
    'EZY': 'easyJet',
    'ETH': 'Ethiopian Airlines',
    'FDX': 'FedEx',
    'JAL': 'Japan Airlines',
    'KAL': 'Korean Air',
    'KLM': 'KLM Royal Dutch Airlines',
    'QFA': 'Qantas',
    'QTR': 'Qatar Airways',
    'RYR': 'Ryanair',
    'SIA': 'Singapore Airlines',
    'SWA': 'Southwest Airlines',
    'THY': 'Turkish Airlines',
    'UAE': 'Emirates',
    'UAL': 'United Airlines',
    'UPS': 'UPS',
    'VIR': 'Virgin Atlantic',
}


def airline_for_callsign(
    callsign: Optional[str],
    airlines: Optional[Dict[str, str]] = None,
) -> str:
    """
    Airline display name for a callsign.

    Examples:
    - BAW287 -> British Airways
    - XYZ123 -> XYZ (Unknown)
    - None / N/A -> Unknown
    """
    if not callsign or callsign == 'N/A':
        return 'Unknown'
    airlines = AIRLINES if airlines is None else airlines
    prefix = callsign[:3].upper()
    return airlines.get(prefix) or f'{prefix} (Unknown)'
